"""
Data-access collaborators.

The engine only ever reads through the DataSource protocol. Two concrete
sources ship with it: an in-memory one over model lists and a pandas-backed
one for tabular exports (CSV dumps of the app database).
"""
import io
import logging
import pandas as pd
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set, Union

from .errors import DataSourceError
from .models import Group, Person, Snapshot, Subscription, Transaction

logger = logging.getLogger(__name__)

LIST_DELIMITER = ";"

REQUIRED_COLUMNS = {
    "people": {"id", "name"},
    "transactions": {"payer_id", "payee_id"},
    "groups": {"id", "name"},
    "subscriptions": {"id", "name", "person_id"},
}


class DataSource(Protocol):
    def fetch_all_people(self) -> List[Person]: ...

    def fetch_all_transactions(self) -> List[Transaction]: ...

    def fetch_all_groups(self) -> List[Group]: ...

    def fetch_all_subscriptions(self) -> List[Subscription]: ...


def take_snapshot(source: DataSource) -> Snapshot:
    """Read every collection once. Errors from the source propagate unchanged."""
    return Snapshot(
        people=list(source.fetch_all_people()),
        transactions=list(source.fetch_all_transactions()),
        groups=list(source.fetch_all_groups()),
        subscriptions=list(source.fetch_all_subscriptions()),
    )


class InMemoryDataSource:
    def __init__(
        self,
        people: Iterable[Person] = (),
        transactions: Iterable[Transaction] = (),
        groups: Iterable[Group] = (),
        subscriptions: Iterable[Subscription] = (),
    ):
        self.people = list(people)
        self.transactions = list(transactions)
        self.groups = list(groups)
        self.subscriptions = list(subscriptions)

    def fetch_all_people(self) -> List[Person]:
        return list(self.people)

    def fetch_all_transactions(self) -> List[Transaction]:
        return list(self.transactions)

    def fetch_all_groups(self) -> List[Group]:
        return list(self.groups)

    def fetch_all_subscriptions(self) -> List[Subscription]:
        return list(self.subscriptions)


def _clean_cell(value: Any) -> Optional[str]:
    if value is None or (not isinstance(value, (list, set, tuple)) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def _split_ids(value: Any) -> List[str]:
    """'a; b;c' -> ['a', 'b', 'c']. Empty cells give []."""
    if isinstance(value, (list, set, tuple)):
        return [i for i in (_clean_cell(v) for v in value) if i]
    cleaned = _clean_cell(value)
    if cleaned is None:
        return []
    return [i for i in (part.strip() for part in cleaned.split(LIST_DELIMITER)) if i]


def _prepare(df: Optional[pd.DataFrame], table: str) -> pd.DataFrame:
    if df is None:
        return pd.DataFrame(columns=sorted(REQUIRED_COLUMNS[table]))
    df = df.copy()
    df.columns = df.columns.str.strip()
    missing = REQUIRED_COLUMNS[table] - set(df.columns)
    if missing:
        raise DataSourceError(f"{table} table missing required columns: {sorted(missing)}")
    return df


class DataFrameDataSource:
    """
    Serves a snapshot out of pandas DataFrames, one per collection.

    Ids are read as stripped strings. Multi-valued columns (member_ids,
    subgroup_ids, shared_with_ids) hold ';'-separated ids.
    """

    def __init__(
        self,
        people: Optional[pd.DataFrame] = None,
        transactions: Optional[pd.DataFrame] = None,
        groups: Optional[pd.DataFrame] = None,
        subscriptions: Optional[pd.DataFrame] = None,
    ):
        self.people_df = _prepare(people, "people")
        self.transactions_df = _prepare(transactions, "transactions")
        self.groups_df = _prepare(groups, "groups")
        self.subscriptions_df = _prepare(subscriptions, "subscriptions")

    @classmethod
    def from_csv(cls, **tables: Union[str, bytes]) -> "DataFrameDataSource":
        """
        Build from CSV files or raw CSV bytes, keyed by collection name.

        Example: DataFrameDataSource.from_csv(people="people.csv", transactions=raw_bytes)
        """
        unknown = set(tables) - set(REQUIRED_COLUMNS)
        if unknown:
            raise DataSourceError(f"Unknown tables: {sorted(unknown)}")

        frames: Dict[str, pd.DataFrame] = {}
        for name, content in tables.items():
            if isinstance(content, bytes):
                frames[name] = pd.read_csv(io.BytesIO(content), dtype=str)
            else:
                frames[name] = pd.read_csv(content, dtype=str)
            logger.info(f"Loaded {len(frames[name]):,} {name} rows")
        return cls(**frames)

    def fetch_all_people(self) -> List[Person]:
        people = []
        for row in self.people_df.to_dict("records"):
            email = _clean_cell(row.get("email"))
            people.append(Person(id=_clean_cell(row["id"]), name=_clean_cell(row["name"]) or "", email=email))
        return people

    def fetch_all_transactions(self) -> List[Transaction]:
        transactions = []
        for i, row in enumerate(self.transactions_df.to_dict("records")):
            fields: Dict[str, Any] = {
                "id": _clean_cell(row.get("id")) or f"row-{i}",
                "payer_id": _clean_cell(row["payer_id"]),
                "payee_id": _clean_cell(row["payee_id"]),
            }
            raw_amount = _clean_cell(row.get("amount"))
            if raw_amount is not None:
                amount = pd.to_numeric(raw_amount, errors="coerce")
                if not pd.isna(amount):
                    fields["amount"] = float(amount)
            raw_date = _clean_cell(row.get("date"))
            if raw_date is not None:
                date = pd.to_datetime(raw_date, errors="coerce")
                if not pd.isna(date):
                    fields["date"] = date.to_pydatetime()
            transactions.append(Transaction(**fields))
        return transactions

    def fetch_all_groups(self) -> List[Group]:
        groups = []
        for row in self.groups_df.to_dict("records"):
            member_ids: Set[str] = set(_split_ids(row.get("member_ids")))
            subgroup_ids: Set[str] = set(_split_ids(row.get("subgroup_ids")))
            groups.append(Group(
                id=_clean_cell(row["id"]),
                name=_clean_cell(row["name"]) or "",
                member_ids=member_ids,
                subgroup_ids=subgroup_ids,
            ))
        return groups

    def fetch_all_subscriptions(self) -> List[Subscription]:
        subscriptions = []
        for row in self.subscriptions_df.to_dict("records"):
            subscriptions.append(Subscription(
                id=_clean_cell(row["id"]),
                name=_clean_cell(row["name"]) or "",
                person_id=_clean_cell(row["person_id"]),
                shared_with_ids=_split_ids(row.get("shared_with_ids")),
            ))
        return subscriptions
