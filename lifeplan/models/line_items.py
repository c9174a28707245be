"""
Line-item store for income, expense, asset and liability entries.

Each of the four item kinds is split into a personal and a corporate book,
and every entry carries a sparse year-to-amount mapping. All store
operations are copy-on-write: they return a new store and leave the
receiver untouched, so no two stores ever share a mutable item.
"""

from enum import Enum
from typing import Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field

from lifeplan.errors import LineItemNotFoundError

ItemKind = Literal["income", "expense", "asset", "liability"]
Book = Literal["personal", "corporate"]

ITEM_KINDS = ("income", "expense", "asset", "liability")
BOOKS = ("personal", "corporate")


class ItemRole(str, Enum):
    """Stable binding between a line item and a projection component."""

    SALARY = "salary"
    SIDE_INCOME = "side_income"
    SPOUSE_INCOME = "spouse_income"
    CORPORATE_SALES = "corporate_sales"
    CORPORATE_OTHER_INCOME = "corporate_other_income"
    LIVING_EXPENSE = "living_expense"
    HOUSING_EXPENSE = "housing_expense"
    EDUCATION_EXPENSE = "education_expense"
    OTHER_EXPENSE = "other_expense"
    CORPORATE_EXPENSE = "corporate_expense"
    CORPORATE_OTHER_EXPENSE = "corporate_other_expense"
    REAL_ESTATE = "real_estate"
    HOUSING_LOAN = "housing_loan"


class LineItem(BaseModel):
    """A named entry with a year-indexed amount mapping."""

    id: str = Field(..., min_length=1, description="Unique within section and book")
    name: str = Field(..., description="Display name")
    type: str = Field(default="other", description="Semantic type tag")
    category: Optional[str] = Field(
        default=None, description="Display grouping only, never read by projections"
    )
    role: Optional[ItemRole] = Field(
        default=None, description="Projection component this item feeds"
    )
    amounts: Dict[int, float] = Field(
        default_factory=dict, description="Amount per year in man-yen"
    )

    def amount(self, year: int) -> float:
        """Amount for a year; years without an entry count as 0."""
        return self.amounts.get(year, 0.0)


class LineItemSection(BaseModel):
    """Personal and corporate books of one item kind."""

    personal: List[LineItem] = Field(default_factory=list)
    corporate: List[LineItem] = Field(default_factory=list)

    def items(self, book: Book) -> List[LineItem]:
        return self.personal if book == "personal" else self.corporate


def _item(
    item_id: str, name: str, type_: str, role: Optional[ItemRole] = None
) -> LineItem:
    return LineItem(id=item_id, name=name, type=type_, role=role)


def default_income_section() -> LineItemSection:
    return LineItemSection(
        personal=[
            _item("1", "給与収入", "income", ItemRole.SALARY),
            _item("2", "事業収入", "profit"),
            _item("3", "副業収入", "side", ItemRole.SIDE_INCOME),
        ],
        corporate=[
            _item("1", "売上", "income", ItemRole.CORPORATE_SALES),
            _item("2", "その他収入", "income", ItemRole.CORPORATE_OTHER_INCOME),
        ],
    )


def default_expense_section() -> LineItemSection:
    return LineItemSection(
        personal=[
            _item("1", "生活費", "living", ItemRole.LIVING_EXPENSE),
            _item("2", "住居費", "housing", ItemRole.HOUSING_EXPENSE),
            _item("3", "教育費", "education", ItemRole.EDUCATION_EXPENSE),
            _item("4", "その他", "other", ItemRole.OTHER_EXPENSE),
        ],
        corporate=[
            _item("1", "事業経費", "other", ItemRole.CORPORATE_EXPENSE),
            _item("2", "その他経費", "other", ItemRole.CORPORATE_OTHER_EXPENSE),
        ],
    )


def default_asset_section() -> LineItemSection:
    return LineItemSection(
        personal=[
            _item("1", "現金・預金", "cash"),
            _item("2", "株式", "investment"),
            _item("3", "投資信託", "investment"),
            _item("4", "不動産", "property", ItemRole.REAL_ESTATE),
        ],
        corporate=[
            _item("1", "現金預金", "cash"),
            _item("2", "設備", "property"),
            _item("3", "在庫", "other"),
        ],
    )


def default_liability_section() -> LineItemSection:
    return LineItemSection(
        personal=[
            _item("1", "ローン", "loan", ItemRole.HOUSING_LOAN),
            _item("2", "クレジット残高", "credit"),
        ],
        corporate=[
            _item("1", "借入金", "loan"),
            _item("2", "未払金", "other"),
        ],
    )


class LineItemStore(BaseModel):
    """All line items of a plan, owned by the application state."""

    income: LineItemSection = Field(default_factory=default_income_section)
    expense: LineItemSection = Field(default_factory=default_expense_section)
    asset: LineItemSection = Field(default_factory=default_asset_section)
    liability: LineItemSection = Field(default_factory=default_liability_section)

    @classmethod
    def empty(cls) -> "LineItemStore":
        return cls(
            income=LineItemSection(),
            expense=LineItemSection(),
            asset=LineItemSection(),
            liability=LineItemSection(),
        )

    # Queries

    def section(self, kind: ItemKind) -> LineItemSection:
        if kind not in ITEM_KINDS:
            raise ValueError(f"Unknown item kind: {kind}")
        return getattr(self, kind)

    def items(self, kind: ItemKind, book: Book) -> List[LineItem]:
        return self.section(kind).items(book)

    def get_item(self, kind: ItemKind, book: Book, item_id: str) -> LineItem:
        for item in self.items(kind, book):
            if item.id == item_id:
                return item
        raise LineItemNotFoundError(kind, book, item_id)

    def find_by_role(
        self, kind: ItemKind, book: Book, role: ItemRole
    ) -> Optional[LineItem]:
        """First item bound to ``role``, or None."""
        return next((i for i in self.items(kind, book) if i.role == role), None)

    def role_amount(
        self, kind: ItemKind, book: Book, role: ItemRole, year: int
    ) -> float:
        """Amount of the item bound to ``role`` in a year; 0 when unbound."""
        item = self.find_by_role(kind, book, role)
        return item.amount(year) if item is not None else 0.0

    def total(self, kind: ItemKind, book: Book, year: int) -> float:
        """Sum of all items of a kind and book for one year."""
        return sum(item.amount(year) for item in self.items(kind, book))

    def next_id(self, kind: ItemKind, book: Book) -> str:
        numeric_ids = [
            int(item.id) for item in self.items(kind, book) if item.id.isdigit()
        ]
        return str(max(numeric_ids, default=0) + 1)

    # Copy-on-write mutations

    def _replace_items(
        self, kind: ItemKind, book: Book, items: List[LineItem]
    ) -> "LineItemStore":
        store = self.model_copy(deep=True)
        section = store.section(kind)
        setattr(section, book, [item.model_copy(deep=True) for item in items])
        return store

    def _update_item(
        self, kind: ItemKind, book: Book, item_id: str, **changes
    ) -> "LineItemStore":
        self.get_item(kind, book, item_id)
        items = [
            item.model_copy(update=changes, deep=True) if item.id == item_id else item
            for item in self.items(kind, book)
        ]
        return self._replace_items(kind, book, items)

    def add_item(
        self,
        kind: ItemKind,
        book: Book,
        name: str = "その他",
        type: str = "other",
        category: Optional[str] = None,
        role: Optional[ItemRole] = None,
        amounts: Optional[Mapping[int, float]] = None,
    ) -> "LineItemStore":
        """Append a new item with the next free integer id."""
        item = LineItem(
            id=self.next_id(kind, book),
            name=name,
            type=type,
            category=category,
            role=role,
            amounts=dict(amounts or {}),
        )
        return self._replace_items(kind, book, [*self.items(kind, book), item])

    def remove_item(self, kind: ItemKind, book: Book, item_id: str) -> "LineItemStore":
        self.get_item(kind, book, item_id)
        items = [item for item in self.items(kind, book) if item.id != item_id]
        return self._replace_items(kind, book, items)

    def rename_item(
        self, kind: ItemKind, book: Book, item_id: str, name: str
    ) -> "LineItemStore":
        return self._update_item(kind, book, item_id, name=name)

    def recategorize_item(
        self, kind: ItemKind, book: Book, item_id: str, category: Optional[str]
    ) -> "LineItemStore":
        return self._update_item(kind, book, item_id, category=category)

    def set_amount(
        self, kind: ItemKind, book: Book, item_id: str, year: int, value: float
    ) -> "LineItemStore":
        item = self.get_item(kind, book, item_id)
        amounts = {**item.amounts, year: value}
        return self._update_item(kind, book, item_id, amounts=amounts)

    def set_role_amounts(
        self,
        kind: ItemKind,
        book: Book,
        role: ItemRole,
        amounts: Mapping[int, float],
    ) -> "LineItemStore":
        """
        Overwrite the given years of the item bound to ``role``.

        Years not present in ``amounts`` keep their value. A store without an
        item for ``role`` is returned unchanged.
        """
        item = self.find_by_role(kind, book, role)
        if item is None:
            return self
        return self._update_item(
            kind, book, item.id, amounts={**item.amounts, **amounts}
        )

    def clear_role_amounts(
        self, kind: ItemKind, book: Book, role: ItemRole
    ) -> "LineItemStore":
        """Empty the amounts of the item bound to ``role``, if any."""
        item = self.find_by_role(kind, book, role)
        if item is None or not item.amounts:
            return self
        return self._update_item(kind, book, item.id, amounts={})

    def remove_role_items(
        self, kind: ItemKind, book: Book, role: ItemRole
    ) -> "LineItemStore":
        """Drop every item bound to ``role``."""
        items = [item for item in self.items(kind, book) if item.role != role]
        if len(items) == len(self.items(kind, book)):
            return self
        return self._replace_items(kind, book, items)
