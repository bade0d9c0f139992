"""
Token Ledger Engine

Single-asset fungible token ledger. Tracks balances and allowances, moves
value directly (transfer) or on behalf of an owner (transfer_from), and burns
a fixed percentage of every transfer by crediting an unspendable burn sink.

Balances are integers in base units (18 implied decimals). The raw total
supply, the sum of every balance including the burn sink, never changes after
the initial mint; the reported total supply subtracts the burn sink's balance.
Every mutation is validated completely before anything is written, and all
writes of one operation happen inside a single storage transaction.
"""

from collections import deque
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import json
import threading

from .audit import AuditTrail, AuditEventType
from .config import TokenLedgerConfig, get_config
from .events import (
    EventDispatcher, EventPayload, create_approval_event, create_transfer_event
)
from .logging_config import configure_logging, get_logger, log_action
from .storage import StorageInterface, create_storage
from .units import (
    BurnSplit, checked_add, checked_sub, compute_burn_split, format_units,
    is_valid_amount
)


METADATA_TABLE = "token_metadata"
BALANCES_TABLE = "token_balances"
ALLOWANCES_TABLE = "token_allowances"
EVENTS_TABLE = "token_events"

METADATA_ID = "token"
STATE_ID = "state"


class TokenLedgerError(ValueError):
    """Base class for rejected ledger operations"""
    pass


class InvalidInputError(TokenLedgerError):
    """Malformed account identifier, amount or metadata"""
    pass


class InsufficientBalanceError(TokenLedgerError):
    """The debited account cannot cover the requested amount"""
    pass


class InsufficientAllowanceError(TokenLedgerError):
    """The spender's delegated budget cannot cover the requested amount"""
    pass


class UnauthorizedError(TokenLedgerError, PermissionError):
    """The caller is not allowed to perform the operation"""
    pass


@dataclass(frozen=True)
class TokenMetadata:
    """Immutable token metadata fixed at initialization"""
    name: str
    symbol: str
    decimals: int
    owner: str
    burn_sink: str
    burn_percent: int
    initial_supply: int
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'symbol': self.symbol,
            'decimals': self.decimals,
            'owner': self.owner,
            'burn_sink': self.burn_sink,
            'burn_percent': self.burn_percent,
            'initial_supply': str(self.initial_supply),
            'created_at': self.created_at.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TokenMetadata':
        return cls(
            name=data['name'],
            symbol=data['symbol'],
            decimals=int(data['decimals']),
            owner=data['owner'],
            burn_sink=data['burn_sink'],
            burn_percent=int(data['burn_percent']),
            initial_supply=int(data['initial_supply']),
            created_at=datetime.fromisoformat(data['created_at'])
        )


class TokenLedger:
    """
    Burn-on-transfer fungible token ledger

    All mutating operations take the acting account explicitly as ``caller``
    and run under a single re-entrant lock, so they behave as if executed one
    at a time. Read accessors take the same lock and never observe a
    half-applied transfer.
    """

    def __init__(
        self,
        storage: Optional[StorageInterface] = None,
        audit_trail: Optional[AuditTrail] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        config: Optional[TokenLedgerConfig] = None
    ):
        self.config = config or get_config()
        self.storage = storage or create_storage(self.config.database_url)

        if audit_trail is None and self.config.enable_audit_logging:
            audit_trail = AuditTrail(self.storage)
        self.audit_trail = audit_trail

        self.event_dispatcher = event_dispatcher or EventDispatcher()
        self.logger = get_logger("token_ledger.ledger")
        self._lock = threading.RLock()

        # Committed notifications waiting for delivery, in sequence order
        self._outbox: deque = deque()
        self._publishing = False

        self._metadata: Optional[TokenMetadata] = None
        self._raw_total_supply = 0
        self._event_sequence = 0
        self._load_metadata()

    @classmethod
    def load(
        cls,
        storage: StorageInterface,
        audit_trail: Optional[AuditTrail] = None,
        event_dispatcher: Optional[EventDispatcher] = None,
        config: Optional[TokenLedgerConfig] = None
    ) -> 'TokenLedger':
        """
        Reopen a ledger previously initialized on this storage

        Raises:
            InvalidInputError: If the storage holds no initialized ledger
        """
        ledger = cls(storage, audit_trail, event_dispatcher, config)
        if not ledger.is_initialized:
            raise InvalidInputError("Storage does not contain an initialized token ledger")
        return ledger

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._metadata is not None

    def initialize(self, name: str, symbol: str, owner_account: str) -> 'TokenLedger':
        """
        Fix the token metadata and mint the whole supply to the owner

        Can be done exactly once per storage. Emits the mint notification
        Transfer(burn_sink, owner, initial_supply).

        Args:
            name: Token name, non-empty
            symbol: Token symbol, non-empty
            owner_account: Account receiving the initial supply

        Returns:
            The ledger itself

        Raises:
            InvalidInputError: On empty metadata, an invalid owner, or if the
                ledger is already initialized
        """
        with self._lock:
            if self.is_initialized:
                raise InvalidInputError("Token ledger is already initialized")

            self._require_text(name, "name")
            self._require_text(symbol, "symbol")
            self._require_account(owner_account, "owner_account")
            if owner_account == self.config.burn_sink_account:
                raise InvalidInputError("The burn sink cannot own the token")

            initial_supply = self.config.initial_supply
            if not is_valid_amount(initial_supply):
                raise InvalidInputError(f"Initial supply {initial_supply} is outside the uint256 range")

            metadata = TokenMetadata(
                name=name,
                symbol=symbol,
                decimals=self.config.token_decimals,
                owner=owner_account,
                burn_sink=self.config.burn_sink_account,
                burn_percent=self.config.burn_percent,
                initial_supply=initial_supply,
                created_at=datetime.now(timezone.utc)
            )
            mint_event = create_transfer_event(1, metadata.burn_sink, owner_account, initial_supply)

            try:
                with self.storage.atomic():
                    self.storage.save(METADATA_TABLE, METADATA_ID, metadata.to_dict())
                    self._put_balance(owner_account, initial_supply)
                    self._append_event(mint_event)
                    self._save_state(initial_supply, mint_event.sequence)

                    if self.audit_trail:
                        self.audit_trail.log_event(
                            event_type=AuditEventType.LEDGER_INITIALIZED,
                            entity_type="ledger",
                            entity_id=METADATA_ID,
                            metadata={
                                "name": name,
                                "symbol": symbol,
                                "owner": owner_account,
                                "initial_supply": initial_supply,
                                "burn_percent": metadata.burn_percent
                            },
                            caller=owner_account
                        )
            except Exception:
                self._resync_audit()
                raise

            self._metadata = metadata
            self._raw_total_supply = initial_supply
            self._event_sequence = mint_event.sequence

            log_action(
                self.logger, "info",
                f"Token {symbol} initialized with {format_units(initial_supply, metadata.decimals)} minted to {owner_account}",
                caller=owner_account, action="initialize", resource=f"token:{symbol}"
            )

            self._publish(mint_event)
            return self

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def transfer(self, caller: str, to_account: str, amount: int) -> bool:
        """
        Move amount from the caller to to_account, burning a fixed percentage

        The caller is debited the full amount; to_account receives
        amount - burn and the burn sink receives burn = floor(amount * p / 100).
        Emits Transfer(caller, to, net) then Transfer(caller, burn_sink, burn).

        Args:
            caller: Account sending the tokens
            to_account: Recipient account
            amount: Amount in base units, strictly positive

        Returns:
            True on success

        Raises:
            InvalidInputError: On malformed accounts or amount, or a transfer
                to the burn sink
            UnauthorizedError: If the caller is the burn sink
            InsufficientBalanceError: If the caller's balance is below amount
            AmountOverflowError: If the burn computation leaves the uint256
                range; only checked once the balance covers amount
        """
        with self._lock:
            try:
                self._require_initialized()
                self._require_account(caller, "caller")
                self._require_account(to_account, "to_account")
                self._require_amount(amount, allow_zero=False)
                self._require_can_spend(caller)
                self._require_recipient(to_account)

                balance = self._get_balance(caller)
                if balance < amount:
                    raise InsufficientBalanceError(
                        f"Insufficient balance: {caller} has {balance}, requested {amount}"
                    )
                split = compute_burn_split(amount, self._metadata.burn_percent)
            except ValueError as e:
                self._reject("transfer", caller, e, {"to": to_account, "amount": amount})
                raise

            self._move(caller, caller, to_account, split)
            return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        """
        Set the amount spender may move out of the caller's balance

        Overwrites any previous allowance for the pair. Self-approval and
        zero approval are legal. Emits Approval(caller, spender, amount).

        Raises:
            InvalidInputError: On malformed accounts or amount
            UnauthorizedError: If the caller is the burn sink
        """
        with self._lock:
            try:
                self._require_initialized()
                self._require_account(caller, "caller")
                self._require_account(spender, "spender")
                self._require_amount(amount, allow_zero=True)
                self._require_can_spend(caller)
            except ValueError as e:
                self._reject("approve", caller, e, {"spender": spender, "amount": amount})
                raise

            self._set_allowance(caller, spender, amount, "approve")
            return True

    def increase_allowance(self, caller: str, spender: str, added_value: int) -> bool:
        """
        Raise the caller's allowance for spender by added_value

        Emits Approval with the new total.

        Raises:
            InvalidInputError: On malformed accounts or amount
            UnauthorizedError: If the caller is the burn sink
            AmountOverflowError: If the new allowance exceeds the uint256 range
        """
        with self._lock:
            try:
                self._require_initialized()
                self._require_account(caller, "caller")
                self._require_account(spender, "spender")
                self._require_amount(added_value, allow_zero=True)
                self._require_can_spend(caller)
                new_allowance = checked_add(self._get_allowance(caller, spender), added_value)
            except ValueError as e:
                self._reject("increase_allowance", caller, e, {"spender": spender, "amount": added_value})
                raise

            self._set_allowance(caller, spender, new_allowance, "increase_allowance")
            return True

    def decrease_allowance(self, caller: str, spender: str, subtracted_value: int) -> bool:
        """
        Lower the caller's allowance for spender by subtracted_value

        Emits Approval with the new total.

        Raises:
            InvalidInputError: On malformed accounts or amount
            UnauthorizedError: If the caller is the burn sink
            InsufficientAllowanceError: If the allowance would drop below zero
        """
        with self._lock:
            try:
                self._require_initialized()
                self._require_account(caller, "caller")
                self._require_account(spender, "spender")
                self._require_amount(subtracted_value, allow_zero=True)
                self._require_can_spend(caller)

                current = self._get_allowance(caller, spender)
                if current < subtracted_value:
                    raise InsufficientAllowanceError(
                        f"Insufficient allowance: decreased allowance below zero "
                        f"({current} - {subtracted_value})"
                    )
            except ValueError as e:
                self._reject("decrease_allowance", caller, e, {"spender": spender, "amount": subtracted_value})
                raise

            self._set_allowance(caller, spender, current - subtracted_value, "decrease_allowance")
            return True

    def transfer_from(self, caller: str, owner_account: str, to_account: str, amount: int) -> bool:
        """
        Move amount out of owner_account on the owner's behalf

        The caller is the spender. The allowance is checked before the
        owner's balance, so when both are short InsufficientAllowanceError is
        raised. On success the allowance drops by the full pre-burn amount and
        the same burn split as transfer applies, with the owner as sender.

        Args:
            caller: Spender account holding the allowance
            owner_account: Account being debited
            to_account: Recipient account
            amount: Amount in base units, strictly positive

        Returns:
            True on success

        Raises:
            InvalidInputError: On malformed accounts or amount, or a transfer
                to the burn sink
            UnauthorizedError: If the caller or the owner is the burn sink
            InsufficientAllowanceError: If the allowance is below amount
            InsufficientBalanceError: If the owner's balance is below amount
        """
        with self._lock:
            try:
                self._require_initialized()
                self._require_account(caller, "caller")
                self._require_account(owner_account, "owner_account")
                self._require_account(to_account, "to_account")
                self._require_amount(amount, allow_zero=False)
                self._require_can_spend(caller)
                self._require_can_spend(owner_account)
                self._require_recipient(to_account)

                allowance = self._get_allowance(owner_account, caller)
                if allowance < amount:
                    raise InsufficientAllowanceError(
                        f"Insufficient allowance: {caller} may spend {allowance} of {owner_account}, requested {amount}"
                    )

                balance = self._get_balance(owner_account)
                if balance < amount:
                    raise InsufficientBalanceError(
                        f"Insufficient balance: {owner_account} has {balance}, requested {amount}"
                    )
                split = compute_burn_split(amount, self._metadata.burn_percent)
            except ValueError as e:
                self._reject("transfer_from", caller, e, {
                    "owner": owner_account, "to": to_account, "amount": amount
                })
                raise

            self._move(caller, owner_account, to_account, split,
                       new_allowance=checked_sub(allowance, amount))
            return True

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    def balance_of(self, account: str) -> int:
        """Balance of account in base units (0 for unknown accounts)"""
        with self._lock:
            return self._get_balance(account)

    def allowance(self, owner: str, spender: str) -> int:
        """Remaining amount spender may move out of owner's balance"""
        with self._lock:
            return self._get_allowance(owner, spender)

    def get_total_supply(self) -> int:
        """Circulating supply: raw total supply minus the burn sink balance"""
        with self._lock:
            self._require_initialized()
            return self._raw_total_supply - self._get_balance(self._metadata.burn_sink)

    def raw_total_supply(self) -> int:
        """Sum of all balances, burn sink included"""
        with self._lock:
            return self._raw_total_supply

    def burned_supply(self) -> int:
        """Total amount absorbed by the burn sink"""
        with self._lock:
            self._require_initialized()
            return self._get_balance(self._metadata.burn_sink)

    def get_token_name(self) -> str:
        return self.metadata.name

    def get_symbol(self) -> str:
        return self.metadata.symbol

    def decimals(self) -> int:
        return self.metadata.decimals

    def owner(self) -> str:
        return self.metadata.owner

    def burn_sink(self) -> str:
        return self.metadata.burn_sink

    @property
    def metadata(self) -> TokenMetadata:
        self._require_initialized()
        return self._metadata

    def get_events(self, from_sequence: int = 0, limit: Optional[int] = None) -> List[EventPayload]:
        """
        Persisted notification history in emission order

        Args:
            from_sequence: Only return events with sequence >= from_sequence
            limit: Maximum number of events to return

        Returns:
            List of EventPayload objects sorted by sequence
        """
        with self._lock:
            events = [EventPayload.from_dict(data) for data in self.storage.load_all(EVENTS_TABLE)]
            events = [e for e in events if e.sequence >= from_sequence]
            events.sort(key=lambda e: e.sequence)
            if limit is not None:
                events = events[:limit]
            return events

    def verify_invariants(self, record_audit: bool = False) -> Dict[str, Any]:
        """
        Check conservation and non-negativity over the whole balance table

        This walks every balance and allowance record and is meant for
        diagnostics and tests, not for the per-operation path.

        Args:
            record_audit: Append an AUDIT_INTEGRITY_CHECK record with the outcome

        Returns:
            Dictionary with the check results
        """
        with self._lock:
            balances = self.storage.load_all(BALANCES_TABLE)
            allowances = self.storage.load_all(ALLOWANCES_TABLE)

            sum_of_balances = sum(int(record['amount']) for record in balances)
            negative_balances = [r['account'] for r in balances if int(r['amount']) < 0]
            negative_allowances = [
                (r['owner'], r['spender']) for r in allowances if int(r['amount']) < 0
            ]

            result = {
                'valid': True,
                'raw_total_supply': self._raw_total_supply,
                'sum_of_balances': sum_of_balances,
                'burned_supply': self._get_balance(self._metadata.burn_sink) if self._metadata else 0,
                'negative_balances': negative_balances,
                'negative_allowances': negative_allowances,
                'account_count': len(balances)
            }

            if sum_of_balances != self._raw_total_supply or negative_balances or negative_allowances:
                result['valid'] = False
                self.logger.error(f"Ledger invariant violation: {result}")

            if record_audit and self.audit_trail:
                self.audit_trail.log_event(
                    event_type=AuditEventType.AUDIT_INTEGRITY_CHECK,
                    entity_type="ledger",
                    entity_id=METADATA_ID,
                    metadata={"valid": result['valid'], "sum_of_balances": sum_of_balances}
                )

            return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _move(self, caller: str, from_account: str, to_account: str, split: BurnSplit,
              new_allowance: Optional[int] = None) -> None:
        """Apply a validated transfer: three balance updates, optional allowance, two events"""
        sink = self._metadata.burn_sink

        # Pending balances keyed by account so a self-transfer reads its own debit
        pending: Dict[str, int] = {}

        def current(account: str) -> int:
            if account in pending:
                return pending[account]
            return self._get_balance(account)

        pending[from_account] = checked_sub(current(from_account), split.amount)
        pending[to_account] = checked_add(current(to_account), split.net)
        pending[sink] = checked_add(current(sink), split.burn)

        events = [
            create_transfer_event(self._event_sequence + 1, from_account, to_account, split.net),
            create_transfer_event(self._event_sequence + 2, from_account, sink, split.burn)
        ]
        action = "transfer" if new_allowance is None else "transfer_from"

        try:
            with self.storage.atomic():
                for account, balance in pending.items():
                    self._put_balance(account, balance)
                if new_allowance is not None:
                    self._put_allowance(from_account, caller, new_allowance)
                for event in events:
                    self._append_event(event)
                self._save_state(self._raw_total_supply, events[-1].sequence)

                if self.audit_trail:
                    self.audit_trail.log_event(
                        event_type=AuditEventType.TOKENS_TRANSFERRED,
                        entity_type="account",
                        entity_id=from_account,
                        metadata={
                            "action": action,
                            "to": to_account,
                            "amount": split.amount,
                            "net": split.net,
                            "burn": split.burn,
                            "allowance_remaining": new_allowance
                        },
                        caller=caller
                    )
        except Exception:
            self._resync_audit()
            raise

        self._event_sequence = events[-1].sequence

        decimals = self._metadata.decimals
        log_action(
            self.logger, "info",
            f"Transferred {format_units(split.net, decimals)} {self._metadata.symbol} "
            f"from {from_account} to {to_account}, burned {format_units(split.burn, decimals)}",
            caller=caller, action=action, resource=f"account:{from_account}",
            extra={"amount": str(split.amount), "net": str(split.net), "burn": str(split.burn)}
        )

        self._publish(*events)

    def _set_allowance(self, owner: str, spender: str, amount: int, action: str) -> None:
        """Persist a validated allowance and emit Approval"""
        event = create_approval_event(self._event_sequence + 1, owner, spender, amount)

        try:
            with self.storage.atomic():
                self._put_allowance(owner, spender, amount)
                self._append_event(event)
                self._save_state(self._raw_total_supply, event.sequence)

                if self.audit_trail:
                    self.audit_trail.log_event(
                        event_type=AuditEventType.ALLOWANCE_CHANGED,
                        entity_type="allowance",
                        entity_id=self._allowance_id(owner, spender),
                        metadata={"action": action, "spender": spender, "amount": amount},
                        caller=owner
                    )
        except Exception:
            self._resync_audit()
            raise

        self._event_sequence = event.sequence

        log_action(
            self.logger, "info",
            f"Allowance of {spender} over {owner} set to {format_units(amount, self._metadata.decimals)}",
            caller=owner, action=action, resource=f"allowance:{spender}"
        )

        self._publish(event)

    def _publish(self, *events: EventPayload) -> None:
        """
        Deliver committed notifications in sequence order

        A subscriber may call back into the ledger while a notification is
        being delivered. The nested operation only queues its notifications;
        the outermost call drains the queue, so subscribers never see a
        later sequence number before an earlier one.
        """
        self._outbox.extend(events)
        if self._publishing:
            return

        self._publishing = True
        try:
            while self._outbox:
                self.event_dispatcher.publish(self._outbox.popleft())
        finally:
            self._publishing = False

    def _reject(self, action: str, caller: Any, error: Exception, details: Dict[str, Any]) -> None:
        """Log and audit a rejected operation; state is untouched"""
        log_action(
            self.logger, "warning", f"{action} rejected: {error}",
            caller=caller if isinstance(caller, str) else None, action=action,
            extra={"error": type(error).__name__}
        )

        if self.audit_trail and self.is_initialized:
            self.audit_trail.log_event(
                event_type=AuditEventType.OPERATION_REJECTED,
                entity_type="account",
                entity_id=str(caller),
                metadata={
                    "action": action,
                    "error": type(error).__name__,
                    "message": str(error),
                    **{k: str(v) for k, v in details.items()}
                },
                caller=str(caller)
            )

    def _resync_audit(self) -> None:
        if self.audit_trail:
            self.audit_trail.resync()

    def _load_metadata(self) -> None:
        """Restore metadata and counters from storage if the ledger exists"""
        metadata = self.storage.load(METADATA_TABLE, METADATA_ID)
        if not metadata:
            return

        state = self.storage.load(METADATA_TABLE, STATE_ID) or {}
        self._metadata = TokenMetadata.from_dict(metadata)
        self._raw_total_supply = int(state.get('raw_total_supply', self._metadata.initial_supply))
        self._event_sequence = int(state.get('event_sequence', 0))

    def _save_state(self, raw_total_supply: int, event_sequence: int) -> None:
        self.storage.save(METADATA_TABLE, STATE_ID, {
            'raw_total_supply': str(raw_total_supply),
            'event_sequence': event_sequence
        })

    def _append_event(self, event: EventPayload) -> None:
        if self.config.enable_event_log:
            self.storage.save(EVENTS_TABLE, f"{event.sequence:020d}", event.to_dict())

    def _get_balance(self, account: str) -> int:
        record = self.storage.load(BALANCES_TABLE, account)
        if record:
            return int(record['amount'])
        return 0

    def _put_balance(self, account: str, amount: int) -> None:
        self.storage.save(BALANCES_TABLE, account, {'account': account, 'amount': str(amount)})

    @staticmethod
    def _allowance_id(owner: str, spender: str) -> str:
        # JSON keeps the pair unambiguous whatever characters accounts contain
        return json.dumps([owner, spender])

    def _get_allowance(self, owner: str, spender: str) -> int:
        record = self.storage.load(ALLOWANCES_TABLE, self._allowance_id(owner, spender))
        if record:
            return int(record['amount'])
        return 0

    def _put_allowance(self, owner: str, spender: str, amount: int) -> None:
        self.storage.save(ALLOWANCES_TABLE, self._allowance_id(owner, spender), {
            'owner': owner, 'spender': spender, 'amount': str(amount)
        })

    def _require_initialized(self) -> None:
        if self._metadata is None:
            raise InvalidInputError("Token ledger is not initialized")

    @staticmethod
    def _require_text(value: Any, field_name: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError(f"{field_name} must be a non-empty string")

    @staticmethod
    def _require_account(value: Any, field_name: str) -> None:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError(f"{field_name} must be a non-empty account identifier")

    @staticmethod
    def _require_amount(value: Any, allow_zero: bool) -> None:
        if not is_valid_amount(value, allow_zero=allow_zero):
            bound = "non-negative" if allow_zero else "positive"
            raise InvalidInputError(f"Amount must be a {bound} integer no larger than 2**256 - 1, got {value!r}")

    def _require_can_spend(self, account: str) -> None:
        if account == self._metadata.burn_sink:
            raise UnauthorizedError("The burn sink cannot spend or delegate tokens")

    def _require_recipient(self, account: str) -> None:
        if account == self._metadata.burn_sink:
            raise InvalidInputError("Cannot transfer to the burn sink")


def create_ledger(
    name: str,
    symbol: str,
    owner_account: str,
    storage: Optional[StorageInterface] = None,
    audit_trail: Optional[AuditTrail] = None,
    event_dispatcher: Optional[EventDispatcher] = None,
    config: Optional[TokenLedgerConfig] = None
) -> TokenLedger:
    """
    Create and initialize a token ledger in one step

    create_ledger("Muhammed Musa", "MM", owner) mints 1,000,000 tokens
    (10**24 base units) to owner with the default configuration. When the
    configuration sets manage_logging, the package log handler is installed
    from its log_* settings first.
    """
    config = config or get_config()
    if config.manage_logging:
        configure_logging(config)

    ledger = TokenLedger(storage, audit_trail, event_dispatcher, config)
    return ledger.initialize(name, symbol, owner_account)
