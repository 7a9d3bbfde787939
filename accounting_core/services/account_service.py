"""
Account registry: the chart of accounts.

Creates and looks up accounts, and guards the rules that the
rest of the ledger relies on: ids are unique, names are not
blank, parents exist and never form a cycle, and an account's
type never changes once it has been created.
"""

import logging

from accounting_core.errors import (
    CyclicParentError,
    DuplicateIdError,
    InvalidNameError,
    NotFoundError,
    UnknownParentError,
)
from accounting_core.models.enums import AccountType
from accounting_core.schemas.ledger import Account
from accounting_core.storage.base import LedgerStorage

logger = logging.getLogger(__name__)

# Sentinel so update_account can tell "leave parent alone" from
# "detach from parent" (parent_id=None).
_UNCHANGED = object()


# (key, id, name, type) for a small-business chart of accounts
STANDARD_CHART: list[tuple[str, str, str, AccountType]] = [
    ("cash", "1000", "Cash", AccountType.ASSET),
    ("accounts_receivable", "1200", "Accounts Receivable", AccountType.ASSET),
    ("inventory", "1300", "Inventory", AccountType.ASSET),
    ("gst_recoverable", "1400", "GST Recoverable", AccountType.ASSET),
    ("accounts_payable", "2000", "Accounts Payable", AccountType.LIABILITY),
    ("loans_payable", "2100", "Loans Payable", AccountType.LIABILITY),
    ("gst_payable", "2200", "GST Payable", AccountType.LIABILITY),
    ("owners_equity", "3000", "Owner's Equity", AccountType.EQUITY),
    ("retained_earnings", "3200", "Retained Earnings", AccountType.EQUITY),
    ("sales_revenue", "4000", "Sales Revenue", AccountType.INCOME),
    ("service_revenue", "4100", "Service Revenue", AccountType.INCOME),
    ("cost_of_goods_sold", "5000", "Cost of Goods Sold", AccountType.EXPENSE),
    ("rent_expense", "6000", "Rent Expense", AccountType.EXPENSE),
    ("utilities_expense", "6100", "Utilities Expense", AccountType.EXPENSE),
]


class AccountRegistry:

    def __init__(self, storage: LedgerStorage):
        self.storage = storage

    def create_account(
        self,
        account_id: str,
        name: str,
        account_type: AccountType,
        parent_id: str | None = None,
    ) -> Account:
        """
        Create a new account.

        Raises DuplicateIdError if the id is taken,
        UnknownParentError if the parent does not exist and
        InvalidNameError if the name is blank.
        """
        if not name or not name.strip():
            raise InvalidNameError("Account name cannot be empty")

        if self.storage.load_account(account_id) is not None:
            raise DuplicateIdError(
                f"Account with id '{account_id}' already exists"
            )

        if parent_id is not None and self.storage.load_account(parent_id) is None:
            raise UnknownParentError(
                f"Parent account '{parent_id}' does not exist"
            )

        account = Account(
            id=account_id,
            name=name,
            account_type=AccountType(account_type),
            parent_id=parent_id,
        )
        self.storage.save_account(account)
        logger.info(
            "Created account %s (%s)", account.id, account.account_type.value
        )
        return account

    def get_account(self, account_id: str) -> Account:
        account = self.storage.load_account(account_id)
        if account is None:
            raise NotFoundError(f"Account '{account_id}' not found")
        return account

    def list_accounts(
        self, account_type: AccountType | None = None
    ) -> list[Account]:
        """Return accounts in insertion order, optionally of one type."""
        accounts = self.storage.list_accounts()
        if account_type is None:
            return accounts
        return [a for a in accounts if a.account_type == account_type]

    def update_account(
        self,
        account_id: str,
        name: str | None = None,
        parent_id=_UNCHANGED,
    ) -> Account:
        """
        Edit an account's name and/or parent.

        The account type cannot be changed here or anywhere else.
        Passing parent_id=None detaches the account from its parent.
        """
        account = self.get_account(account_id)
        changes = {}

        if name is not None:
            if not name.strip():
                raise InvalidNameError("Account name cannot be empty")
            changes["name"] = name

        if parent_id is not _UNCHANGED:
            if parent_id is not None:
                if self.storage.load_account(parent_id) is None:
                    raise UnknownParentError(
                        f"Parent account '{parent_id}' does not exist"
                    )
                self._check_no_cycle(account_id, parent_id)
            changes["parent_id"] = parent_id

        if not changes:
            return account

        updated = account.model_copy(update=changes)
        self.storage.update_account(updated)
        logger.info("Updated account %s", account_id)
        return updated

    def _check_no_cycle(self, account_id: str, parent_id: str) -> None:
        """Walk up from the proposed parent; meeting account_id is a cycle."""
        seen = set()
        current = parent_id
        while current is not None:
            if current == account_id or current in seen:
                raise CyclicParentError(
                    f"Account '{account_id}' cannot be its own ancestor"
                )
            seen.add(current)
            parent = self.storage.load_account(current)
            current = parent.parent_id if parent else None

    def child_accounts(self, parent_id: str) -> list[Account]:
        """Direct children of an account."""
        self.get_account(parent_id)
        return [
            a for a in self.storage.list_accounts()
            if a.parent_id == parent_id
        ]

    def account_path(self, account_id: str) -> list[Account]:
        """The chain of accounts from the root down to account_id."""
        path = []
        current = account_id
        while current is not None:
            account = self.get_account(current)
            path.insert(0, account)
            current = account.parent_id
        return path

    def setup_standard_chart(self) -> dict[str, Account]:
        """Create the standard chart and return it keyed by short name."""
        return {
            key: self.create_account(account_id, name, account_type)
            for key, account_id, name, account_type in STANDARD_CHART
        }
