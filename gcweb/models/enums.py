"""Enumerations shared by search and log models."""

from enum import Enum, IntEnum, StrEnum


class TriState(StrEnum):
    """Three-valued filter flag: only matching, only not matching, or no filter."""

    TRUE = "true"
    FALSE = "false"
    UNSET = "unset"

    @classmethod
    def of(cls, value: bool | None) -> "TriState":
        if value is None:
            return cls.UNSET
        return cls.TRUE if value else cls.FALSE

    @property
    def is_set(self) -> bool:
        return self is not TriState.UNSET


class CacheType(Enum):
    """Geocache types with their waypoint type id on the service."""

    TRADITIONAL = "2"
    MULTI = "3"
    VIRTUAL = "4"
    LETTERBOX = "5"
    EVENT = "6"
    MYSTERY = "8"
    PROJECT_APE = "9"
    WEBCAM = "11"
    LOCATIONLESS = "12"
    CITO = "13"
    EARTH = "137"
    MEGA_EVENT = "453"
    GPS_EXHIBIT = "1304"
    WHERIGO = "1858"
    COMMUN_CELEBRATION = "3653"
    GCHQ = "3773"
    BLOCK_PARTY = "4738"
    GIGA_EVENT = "7005"
    ALL = "all"
    UNKNOWN = "unknown"

    @property
    def wpt_type_id(self) -> str:
        return self.value

    @classmethod
    def by_wpt_type_id(cls, wpt_type_id: str | int) -> "CacheType":
        try:
            return cls(str(wpt_type_id))
        except ValueError:
            return cls.UNKNOWN


class CacheSize(StrEnum):
    """Container sizes."""

    NANO = "nano"
    MICRO = "micro"
    SMALL = "small"
    REGULAR = "regular"
    LARGE = "large"
    VIRTUAL = "virtual"
    NOT_CHOSEN = "not_chosen"
    OTHER = "other"
    UNKNOWN = "unknown"

    @property
    def gc_ids(self) -> tuple[int, ...]:
        """Service container ids for this size; empty if the service has no such size."""
        return _SIZE_GC_IDS.get(self, ())

    @classmethod
    def by_gc_id(cls, gc_id: int) -> "CacheSize":
        for size, gc_ids in _SIZE_GC_IDS.items():
            if gc_id in gc_ids:
                return size
        return cls.UNKNOWN


_SIZE_GC_IDS: dict[CacheSize, tuple[int, ...]] = {
    CacheSize.NOT_CHOSEN: (1,),
    CacheSize.MICRO: (2,),
    CacheSize.REGULAR: (3,),
    CacheSize.LARGE: (4,),
    CacheSize.VIRTUAL: (5,),
    CacheSize.OTHER: (6,),
    CacheSize.SMALL: (8,),
}


class CacheAttribute(Enum):
    """Cache attributes keyed by their service id; the value is the raw attribute name."""

    DOGS = (1, "dogs")
    FEE = (2, "fee")
    RAPPELLING = (3, "rappelling")
    BOAT = (4, "boat")
    SCUBA = (5, "scuba")
    KIDS = (6, "kids")
    ONEHOUR = (7, "onehour")
    SCENIC = (8, "scenic")
    HIKING = (9, "hiking")
    CLIMBING = (10, "climbing")
    WADING = (11, "wading")
    SWIMMING = (12, "swimming")
    AVAILABLE = (13, "available")
    NIGHT = (14, "night")
    WINTER = (15, "winter")
    POISONOAK = (17, "poisonoak")
    DANGEROUSANIMALS = (18, "dangerousanimals")
    TICKS = (19, "ticks")
    MINE = (20, "mine")
    CLIFF = (21, "cliff")
    HUNTING = (22, "hunting")
    DANGER = (23, "danger")
    WHEELCHAIR = (24, "wheelchair")
    PARKING = (25, "parking")
    PUBLIC = (26, "public")
    WATER = (27, "water")
    RESTROOMS = (28, "restrooms")
    PHONE = (29, "phone")
    PICNIC = (30, "picnic")
    CAMPING = (31, "camping")
    BICYCLES = (32, "bicycles")
    MOTORCYCLES = (33, "motorcycles")
    QUADS = (34, "quads")
    JEEPS = (35, "jeeps")
    SNOWMOBILES = (36, "snowmobiles")
    HORSES = (37, "horses")
    CAMPFIRES = (38, "campfires")
    THORN = (39, "thorn")
    STEALTH = (40, "stealth")
    STROLLER = (41, "stroller")
    FIRSTAID = (42, "firstaid")
    COW = (43, "cow")
    FLASHLIGHT = (44, "flashlight")
    LANDF = (45, "landf")
    RV = (46, "rv")
    FIELD_PUZZLE = (47, "field_puzzle")
    UV = (48, "uv")
    SNOWSHOES = (49, "snowshoes")
    SKIIS = (50, "skiis")
    S_TOOL = (51, "s_tool")
    NIGHTCACHE = (52, "nightcache")
    PARKNGRAB = (53, "parkngrab")
    ABANDONEDBUILDING = (54, "abandonedbuilding")
    HIKE_SHORT = (55, "hike_short")
    HIKE_MED = (56, "hike_med")
    HIKE_LONG = (57, "hike_long")
    FUEL = (58, "fuel")
    FOOD = (59, "food")
    WIRELESSBEACON = (60, "wirelessbeacon")
    PARTNERSHIP = (61, "partnership")
    SEASONAL = (62, "seasonal")
    TOURISTOK = (63, "touristok")
    TREECLIMBING = (64, "treeclimbing")
    FRONTYARD = (65, "frontyard")
    TEAMWORK = (66, "teamwork")
    GEOTOUR = (67, "geotour")
    BONUSCACHE = (69, "bonuscache")
    POWERTRAIL = (70, "powertrail")
    CHALLENGECACHE = (71, "challengecache")
    HQSOLUTIONCHECKER = (72, "hqsolutionchecker")

    @property
    def gc_id(self) -> int:
        return self.value[0]

    @property
    def raw_name(self) -> str:
        return self.value[1]

    def get_value(self, applicable: bool) -> str:
        """Printable attribute value, e.g. ``scenic_yes`` or ``wheelchair_no``."""
        return f"{self.raw_name}_{'yes' if applicable else 'no'}"

    @classmethod
    def by_gc_id(cls, gc_id: int) -> "CacheAttribute | None":
        return _ATTRIBUTES_BY_GC_ID.get(gc_id)


_ATTRIBUTES_BY_GC_ID = {attribute.gc_id: attribute for attribute in CacheAttribute}


class DisplaySort(StrEnum):
    """Sort orders offered to users of this library."""

    NAME = "name"
    DISTANCE = "distance"
    FAVORITES = "favorites"
    FAVORITES_RATIO = "favorites_ratio"
    SIZE = "size"
    DIFFICULTY = "difficulty"
    TERRAIN = "terrain"
    INVENTORY = "inventory"
    HIDDEN_DATE = "hidden_date"
    LAST_FOUND = "last_found"


class SortType(StrEnum):
    """Sort keywords understood by the search endpoint."""

    NAME = "geocacheName"
    DISTANCE = "distance"
    FAVORITEPOINT = "favoritePoint"
    SIZE = "containerSize"
    DIFFICULTY = "difficulty"
    TERRAIN = "terrain"
    TRACKABLECOUNT = "trackableCount"
    HIDDENDATE = "placeDate"
    LASTFOUND = "foundDate"

    @property
    def keyword(self) -> str:
        return self.value

    @property
    def display_sorts(self) -> tuple[DisplaySort, ...]:
        return _SORT_TO_DISPLAY[self]

    @classmethod
    def from_display_sort(cls, display_sort: DisplaySort | None) -> "SortType":
        if display_sort is None:
            return cls.DISTANCE
        return _DISPLAY_TO_SORT.get(display_sort, cls.DISTANCE)


_SORT_TO_DISPLAY: dict[SortType, tuple[DisplaySort, ...]] = {
    SortType.NAME: (DisplaySort.NAME,),
    SortType.DISTANCE: (DisplaySort.DISTANCE,),
    SortType.FAVORITEPOINT: (DisplaySort.FAVORITES, DisplaySort.FAVORITES_RATIO),
    SortType.SIZE: (DisplaySort.SIZE,),
    SortType.DIFFICULTY: (DisplaySort.DIFFICULTY,),
    SortType.TERRAIN: (DisplaySort.TERRAIN,),
    SortType.TRACKABLECOUNT: (DisplaySort.INVENTORY,),
    SortType.HIDDENDATE: (DisplaySort.HIDDEN_DATE,),
    SortType.LASTFOUND: (DisplaySort.LAST_FOUND,),
}

_DISPLAY_TO_SORT: dict[DisplaySort, SortType] = {
    display: sort for sort, displays in _SORT_TO_DISPLAY.items() for display in displays
}


class LogType(IntEnum):
    """Cache log types with their service ids."""

    FOUND_IT = 2
    DIDNT_FIND_IT = 3
    NOTE = 4
    ARCHIVE = 5
    NEEDS_ARCHIVE = 7
    WILL_ATTEND = 9
    ATTENDED = 10
    WEBCAM_PHOTO_TAKEN = 11
    UNARCHIVE = 12
    POST_REVIEWER_NOTE = 18
    TEMP_DISABLE_LISTING = 22
    ENABLE_LISTING = 23
    NEEDS_MAINTENANCE = 45
    OWNER_MAINTENANCE = 46
    UPDATE_COORDINATES = 47
    ANNOUNCEMENT = 74


class LogTypeTrackable(IntEnum):
    """Trackable actions with their service log type ids."""

    DO_NOTHING = 0
    NOTE = 4
    RETRIEVED_IT = 13
    DROPPED_OFF = 14
    GRABBED_IT = 19
    DISCOVERED_IT = 48
    MOVE_COLLECTION = 69
    MOVE_INVENTORY = 70
    VISITED = 75


class StatusCode(StrEnum):
    """Closed set of status codes returned by log operations."""

    NO_ERROR = "no_error"
    NO_LOG_TEXT = "no_log_text"
    LOG_POST_ERROR = "log_post_error"
    LOG_IMAGE_POST_ERROR = "log_image_post_error"


class LogWorkflowState(StrEnum):
    """Terminal states of a log workflow run."""

    SUCCESS = "success"
    INPUT_REJECTED = "input_rejected"
    LOG_POST_ERROR = "log_post_error"
    LOG_IMAGE_POST_ERROR = "log_image_post_error"
    ABORTED = "aborted"
