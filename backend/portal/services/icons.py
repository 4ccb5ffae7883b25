"""Symbolic icon catalogue shared with the admin client's icon picker.

Names match the client's icon components one-to-one; the API only stores
the name and validates it against this registry.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class IconInfo:
    name: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class IconCategory:
    name: str
    description: str
    icons: tuple[IconInfo, ...]


def _icons(*entries: tuple[str, str]) -> tuple[IconInfo, ...]:
    return tuple(IconInfo(name=name, keywords=tuple(kw.split())) for name, kw in entries)


ICON_CATEGORIES: tuple[IconCategory, ...] = (
    IconCategory(
        "Business & Office",
        "Icons for corporate and professional applications",
        _icons(
            ("Home", "home house main dashboard"),
            ("Building", "office company building corporate"),
            ("Briefcase", "business work briefcase professional"),
            ("Users", "team people group users"),
            ("Target", "goal objective target aim"),
            ("Award", "achievement success award medal"),
            ("Trophy", "winner champion trophy prize"),
        ),
    ),
    IconCategory(
        "Communication",
        "Icons for messaging and contact",
        _icons(
            ("Mail", "email message mail contact"),
            ("Phone", "call telephone phone contact"),
            ("MessageCircle", "chat message talk conversation"),
            ("Bell", "notification alert bell reminder"),
        ),
    ),
    IconCategory(
        "Files & Data",
        "Icons for documents and data management",
        _icons(
            ("FileText", "document file text paper"),
            ("Folder", "directory folder files organize"),
            ("Archive", "storage archive box save"),
            ("Database", "data database storage sql"),
            ("Server", "server hosting cloud infrastructure"),
            ("Cloud", "cloud storage online sync"),
            ("HardDrive", "drive disk storage hardware"),
        ),
    ),
    IconCategory(
        "Commerce",
        "Icons for e-commerce and finance",
        _icons(
            ("ShoppingCart", "cart shopping buy purchase"),
            ("CreditCard", "payment card credit transaction"),
            ("DollarSign", "money dollar currency price"),
            ("TrendingUp", "growth increase trending rise"),
            ("BarChart", "chart graph analytics stats"),
        ),
    ),
    IconCategory(
        "Actions",
        "Icons for common actions and interactions",
        _icons(
            ("Search", "find search look magnify"),
            ("Filter", "filter sort organize select"),
            ("Download", "download save export get"),
            ("Upload", "upload import send add"),
            ("Share", "share send forward distribute"),
        ),
    ),
    IconCategory(
        "Technology",
        "Icons for tech and development",
        _icons(
            ("Code", "code programming dev development"),
            ("Terminal", "console terminal command cli"),
            ("Cpu", "processor cpu hardware computing"),
            ("Smartphone", "mobile phone smartphone device"),
            ("Monitor", "screen display monitor desktop"),
        ),
    ),
    IconCategory(
        "Location",
        "Icons for maps and navigation",
        _icons(
            ("Globe", "world global internet web"),
            ("Map", "map location navigation directions"),
            ("MapPin", "location pin marker place"),
            ("Navigation", "navigate direction compass guide"),
            ("Compass", "compass direction orientation navigate"),
        ),
    ),
    IconCategory(
        "Education",
        "Icons for learning and knowledge",
        _icons(
            ("Book", "book read library learn"),
            ("GraduationCap", "education graduate school university"),
            ("Bookmark", "bookmark save favorite mark"),
            ("Lightbulb", "idea innovation light think"),
            ("Zap", "energy power fast quick"),
        ),
    ),
    IconCategory(
        "Media",
        "Icons for multimedia content",
        _icons(
            ("Camera", "photo camera picture snapshot"),
            ("Image", "image picture photo gallery"),
            ("Video", "video movie film play"),
            ("Music", "music audio sound song"),
            ("Film", "film movie cinema video"),
        ),
    ),
    IconCategory(
        "Time & Scheduling",
        "Icons for time management",
        _icons(
            ("Calendar", "calendar date schedule event"),
            ("Clock", "time clock watch hour"),
        ),
    ),
    IconCategory(
        "Status & Feedback",
        "Icons for alerts and status indicators",
        _icons(
            ("AlertCircle", "alert warning error attention"),
            ("Info", "information info help details"),
            ("Star", "favorite star rating featured"),
            ("Heart", "like love heart favorite"),
        ),
    ),
)

ALL_ICONS: tuple[IconInfo, ...] = tuple(
    icon for category in ICON_CATEGORIES for icon in category.icons
)

_ICON_NAMES = frozenset(icon.name for icon in ALL_ICONS)


def is_known_icon(name: str) -> bool:
    return name in _ICON_NAMES


def search_icons(query: str) -> list[IconInfo]:
    """Case-insensitive substring match on icon name or any keyword."""
    needle = query.strip().lower()
    if not needle:
        return list(ALL_ICONS)
    return [
        icon
        for icon in ALL_ICONS
        if needle in icon.name.lower() or any(needle in kw for kw in icon.keywords)
    ]
