"""Record schema declarations.

Each record kind is described by a table of field rules. The generic
validator consumes these tables, so adding a field or constraint never
requires new validation code.
"""

from dataclasses import dataclass, field
from enum import Enum


class FieldType(str, Enum):
    """Value types a field can declare."""

    TEXT = "text"
    INTEGER = "integer"
    NUMERIC = "numeric"


class WorkType(str, Enum):
    """Roles a person can hold."""

    CHEF = "chef"
    WAITER = "waiter"
    MANAGER = "manager"


class MenuCategory(str, Enum):
    """Sections of the menu."""

    STARTER = "starter"
    MAIN_COURSE = "main course"
    DESSERT = "dessert"


@dataclass(frozen=True)
class FieldRule:
    """Declaration of a single field.

    Attributes:
        name: Field name as it appears in payloads and stored records
        type: Declared value type
        required: Whether the field must be present and non-empty
        enum: Allowed values, None when unconstrained
        unique: Whether the value must be unique across the collection
    """

    name: str
    type: FieldType
    required: bool = False
    enum: tuple[str, ...] | None = None
    unique: bool = False


@dataclass(frozen=True)
class RecordSchema:
    """Field rule table for one collection.

    Attributes:
        collection: Collection name, also used as the URL prefix
        fields: Ordered field rules
        filter_field: Field used by the list-by-value route
    """

    collection: str
    fields: tuple[FieldRule, ...]
    filter_field: str | None = None
    _by_name: dict[str, FieldRule] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {rule.name: rule for rule in self.fields})
        if self.filter_field is not None and self.filter_field not in self._by_name:
            raise ValueError(
                f"filter_field '{self.filter_field}' is not declared in schema '{self.collection}'"
            )

    def get_rule(self, name: str) -> FieldRule | None:
        """Return the rule for a field, or None if the field is undeclared."""
        return self._by_name.get(name)

    @property
    def field_names(self) -> list[str]:
        return [rule.name for rule in self.fields]

    @property
    def unique_fields(self) -> list[FieldRule]:
        return [rule for rule in self.fields if rule.unique]


PERSON_SCHEMA = RecordSchema(
    collection="person",
    fields=(
        FieldRule("name", FieldType.TEXT, required=True),
        FieldRule("age", FieldType.INTEGER),
        FieldRule(
            "work",
            FieldType.TEXT,
            required=True,
            enum=tuple(work.value for work in WorkType),
        ),
        FieldRule("mobile", FieldType.TEXT, required=True),
        FieldRule("email", FieldType.TEXT, required=True, unique=True),
        FieldRule("address", FieldType.TEXT, required=True),
        FieldRule("salary", FieldType.NUMERIC, required=True),
    ),
    filter_field="work",
)

MENU_SCHEMA = RecordSchema(
    collection="menu",
    fields=(
        FieldRule("name", FieldType.TEXT, required=True),
        FieldRule("price", FieldType.NUMERIC),
        FieldRule(
            "category",
            FieldType.TEXT,
            required=True,
            enum=tuple(category.value for category in MenuCategory),
        ),
        FieldRule("description", FieldType.TEXT, required=True),
    ),
    filter_field="category",
)
