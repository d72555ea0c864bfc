"""Default configuration values."""

# Field aliases: logical field -> accepted header spellings, in priority order.
# Lookups go through core.text.normalize_key, so case, spacing and
# Romanian diacritics do not matter here.
FIELD_ALIASES: dict[str, list[str]] = {
    "name": ["name", "nume", "title", "denumire", "Spatiu ID"],
    "lat": ["lat", "latitude", "latitudine", "Latitudine"],
    "lng": ["lng", "lon", "long", "longitude", "longitudine", "Longitudine"],
    "address": ["address", "adresa", "location", "locatie", "Locatie"],
    "location_text": ["Locatie", "location_text"],
    "space_id": ["Spatiu ID"],
    "periods": ["Perioade Disponibile", "PerioadeDisponibile", "perioade"],
    "image_1": ["Imagini 1_url", "Imagini 1", "img1", "Imagine1", "Poza1"],
    "image_2": ["Imagini 2_url", "Imagini 2", "img2", "Imagine2", "Poza2"],
    "image_3": ["Imagini 3_url", "Imagini 3", "img3", "Imagine3", "Poza3"],
}

# Any of these (normalized) in a row marks it as the header row of a workbook
HEADER_TOKENS = ["latitudine", "longitudine", "locatie", "lat", "lng", "longitude", "latitude"]
HEADER_SEARCH_ROWS = 20

# Columns whose cells carry hyperlinks (images, sketch, street view)
IMAGE_COLUMNS = ["Imagini 1", "Imagini 2", "Imagini 3"]
HYPERLINK_COLUMNS = IMAGE_COLUMNS + ["Schita", "StreetView"]
MAX_IMAGES = 3

CSV_EXTENSIONS = (".csv",)
WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")
SUPPORTED_EXTENSIONS = CSV_EXTENSIONS + WORKBOOK_EXTENSIONS

DEFAULT_ITEM_NAME = "Panou"

# Radius (meters)
DEFAULT_RADIUS = 1000
RADIUS_SLIDER_MIN = 50
RADIUS_SLIDER_MAX = 10000
RADIUS_SLIDER_STEP = 50

# Two reference points closer than this (degrees, per axis) are the same item
SAME_POINT_TOLERANCE = 0.0001

# Spherical Earth radius used by the mapping provider (meters)
EARTH_RADIUS_M = 6378137.0

# Availability periods, e.g. "Disponibil: 01/10/25 : 15/10/25; Disponibil: ..."
PERIOD_DELIMITER = ";"
PERIOD_PATTERN = r"Disponibil:\s*(\d{2}/\d{2}/\d{2})\s*:\s*(\d{2}/\d{2}/\d{2})"
CENTURY_PREFIX = "20"

# Timing (seconds)
DEBOUNCE_DELAY = 0.4
SEARCH_PAGE_DELAY = 0.3
PROVIDER_TIMEOUT = 10

API_KEY_ENV_VAR = "GOOGLE_MAPS_API_KEY"
DEFAULT_MAP_CENTER = (45.9432, 24.9668)
DEFAULT_MAP_ZOOM = 6

# Template offered for download
TEMPLATE_FILENAME = "template_panouri.csv"
TEMPLATE_ROWS = [
    ["name", "lat", "lng", "address"],
    ["Panou exemplu (coordonate)", "46.770439", "23.591423", ""],
    ["Panou exemplu (adresa)", "", "", "Bd. Eroilor 10, Cluj-Napoca"],
]

# Export layouts
IN_RANGE_HEADER = ["Denumire", "Adresa", "Latitudine", "Longitudine", "Distanța (m)", "În radius"]
GROUP_MARKER = "BILLBOARD"
GROUP_COLUMNS = ["name", "address", "lat", "lng", "distance_m"]
GROUPED_EXPORT_FILENAME = "poi_per_billboard_grouped.xlsx"
EXPORT_SHEET_NAME = "data"
EXPORT_EXTENSION = ".xlsx"

# Status and notice texts shown to the operator
MSG_PROCESSING = "Se procesează fișierul..."
MSG_UNSUPPORTED_FORMAT = "Format fișier neacceptat. Folosește .csv, .xlsx sau .xlsm."
MSG_NO_VALID_ROWS = (
    "Nu s-au găsit rânduri cu Latitudine/Longitudine sau adresă validă în foaia încărcată."
)
MSG_GEOCODING = "Geocodare: {address} ({index}/{total})..."
MSG_ROWS_SKIPPED = "{count} rânduri ignorate (fără coordonate sau adresă validă)."
MSG_READ_ERROR = "Eroare la citirea fișierului: {error}"
MSG_PROVIDER_ERROR = (
    "Eroare la serviciul de hărți. Verifică cheia API + Geocoding / Places: {error}"
)
MSG_EMPTY_QUERY = "Introdu un termen de căutare."
MSG_NO_STORE_REFERENCE = "Nu există o locație căutată cu radius pentru a exporta!"
MSG_NO_ITEMS_IN_RANGE = "Nu există panouri în radiusul locației pentru a exporta!"
MSG_NO_PEEK_CIRCLES = "Nu există panouri cu cercuri active pentru a exporta!"
MSG_NO_SEARCH_RESULTS = "Nu există rezultate de căutare pentru a exporta!"
MSG_NO_AVAILABLE_ITEMS = "Nu există panouri filtrate pentru a afișa pe hartă!"
MSG_NO_ORIGINAL_SHEET = "Nu există un fișier Excel importat pentru export!"
MSG_INVALID_SETTINGS = "Fișier de setări invalid: {error}"

# Operator settings file (radius, filters)
SETTINGS_FILENAME = "setari_harta.json"
