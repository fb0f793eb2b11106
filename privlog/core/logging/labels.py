"""Category labels attached to loggers.

Labels are opaque strings. The predefined set covers the usual areas of an
application; hosts add their own with ``Label("My Area")``.
"""
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Label:
    """A named logging category."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, label: "Label | str") -> "Label":
        if isinstance(label, Label):
            return label
        return cls(str(label))


GENERIC = Label("Generic")
NETWORK = Label("Network")
VIEW_LIFECYCLE = Label("View Lifecycle")
UI = Label("UI")
DATABASE = Label("Database")
SWIFT_DATA = Label("SwiftData")
CORE_DATA = Label("CoreData")
FILESYSTEM = Label("Filesystem")
SWIFT_DATA_STORE_MIGRATION = Label("SwiftData Store Migration")
SWIFT_DATA_LIGHTWEIGHT_MIGRATION = Label("SwiftData Lightweight Migration")
SWIFT_DATA_CUSTOM_MIGRATION = Label("SwiftData Custom Migration")
REALM_MIGRATION = Label("Realm Migration")
DATA_MIGRATION = Label("Data Migration")
DATA_MODEL = Label("Data Model")
DATA_PERSISTENCE = Label("Data Persistence")
DATA_VALIDATION = Label("Data Validation")
DATA_TRANSFORMATION = Label("Data Transformation")
DATA_MANIPULATION = Label("Data Manipulation")
DATA_ACCESS = Label("Data Access")
DATA_CACHING = Label("Data Caching")
WIDGET = Label("Widget")
HOME_SCREEN_WIDGET = Label("Home Screen Widget")
LOCK_SCREEN_WIDGET = Label("Lock Screen Widget")
API = Label("API")
GRAPHIC = Label("Graphic")
SOCIAL = Label("Social")
DATE_MANAGEMENT = Label("Date Management")
LOCALIZATION = Label("Localization")
MAPS = Label("Maps")
ANIMATION = Label("Animation")
ANALYTICS = Label("Analytics")
PERFORMANCE = Label("Performance")
CHARTS = Label("Charts")
STORE_KIT = Label("StoreKit")

PREDEFINED_LABELS: tuple[Label, ...] = (
    GENERIC,
    NETWORK,
    VIEW_LIFECYCLE,
    UI,
    DATABASE,
    SWIFT_DATA,
    CORE_DATA,
    FILESYSTEM,
    SWIFT_DATA_STORE_MIGRATION,
    SWIFT_DATA_LIGHTWEIGHT_MIGRATION,
    SWIFT_DATA_CUSTOM_MIGRATION,
    REALM_MIGRATION,
    DATA_MIGRATION,
    DATA_MODEL,
    DATA_PERSISTENCE,
    DATA_VALIDATION,
    DATA_TRANSFORMATION,
    DATA_MANIPULATION,
    DATA_ACCESS,
    DATA_CACHING,
    WIDGET,
    HOME_SCREEN_WIDGET,
    LOCK_SCREEN_WIDGET,
    API,
    GRAPHIC,
    SOCIAL,
    DATE_MANAGEMENT,
    LOCALIZATION,
    MAPS,
    ANIMATION,
    ANALYTICS,
    PERFORMANCE,
    CHARTS,
    STORE_KIT,
)
