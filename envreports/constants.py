"""Shared constants: data paths, column maps, unit factors, colors, model grids."""
import os

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

WATER_DATA_PATH = os.environ.get(
    "WATERSHED_DATA_PATH", os.path.join(ROOT_DIR, "water_chemistry.csv")
)
FIRE_DATA_PATH = os.environ.get(
    "FOREST_FIRES_DATA_PATH", os.path.join(ROOT_DIR, "forestfires.csv")
)
FIRE_DATA_URL = (
    "https://archive.ics.uci.edu/ml/machine-learning-databases/forest-fires/forestfires.csv"
)

LOG_LEVEL = os.environ.get("ENVREPORTS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ── Watershed chemistry ──────────────────────────────────────────────────────
MISSING_SENTINEL = -999

WATER_SITE_COL = "site"
WATER_DATE_COL = "sample_date"

WATER_COLUMN_RENAMES = {
    "SiteName": "site",
    "SampleDate": "sample_date",
    "pH": "ph",
    "SpCond_uScm": "spec_cond",
    "Ca_ueqL": "calcium",
    "Mg_ueqL": "magnesium",
    "Na_ueqL": "sodium",
    "K_ueqL": "potassium",
    "Cl_ueqL": "chloride",
    "SO4_ueqL": "sulfate",
    "NO3_ueqL": "nitrate",
    "ANC_ueqL": "anc",
    "DOC_mgL": "doc",
}

# Equivalent weights (mg/meq); mg/L = ueq/L * eq_wt / 1000
EQUIVALENT_WEIGHTS = {
    "calcium": 20.04,
    "magnesium": 12.15,
    "sodium": 22.99,
    "potassium": 39.10,
    "chloride": 35.45,
    "sulfate": 48.03,
    "nitrate": 62.00,
}

WATER_FEATURES = [
    "ph", "spec_cond", "calcium", "magnesium", "sodium", "potassium",
    "chloride", "sulfate", "nitrate", "anc", "doc",
]

WATER_LABELS = {
    "ph": "pH",
    "spec_cond": "Specific Conductance (µS/cm)",
    "calcium": "Calcium (mg/L)",
    "magnesium": "Magnesium (mg/L)",
    "sodium": "Sodium (mg/L)",
    "potassium": "Potassium (mg/L)",
    "chloride": "Chloride (mg/L)",
    "sulfate": "Sulfate (mg/L)",
    "nitrate": "Nitrate (mg/L)",
    "anc": "Acid Neutralizing Capacity (µeq/L)",
    "doc": "Dissolved Organic Carbon (mg/L)",
}

LINKAGE_METHODS = ["complete", "single", "average"]

# ── Forest fires ─────────────────────────────────────────────────────────────
FIRE_COLUMNS = [
    "X", "Y", "month", "day", "FFMC", "DMC", "DC", "ISI",
    "temp", "RH", "wind", "rain", "area",
]

FIRE_FEATURES = ["FFMC", "DMC", "DC", "ISI", "temp", "RH", "wind", "rain"]
FIRE_TARGET = "log_area"

FIRE_LABELS = {
    "FFMC": "Fine Fuel Moisture Code",
    "DMC": "Duff Moisture Code",
    "DC": "Drought Code",
    "ISI": "Initial Spread Index",
    "temp": "Temperature (°C)",
    "RH": "Relative Humidity (%)",
    "wind": "Wind Speed (km/h)",
    "rain": "Rain (mm/m²)",
    "area": "Burned Area (ha)",
    "log_area": "log(1 + Burned Area)",
}

MONTH_ORDER = ["jan", "feb", "mar", "apr", "may", "jun",
               "jul", "aug", "sep", "oct", "nov", "dec"]
DAY_ORDER = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]

SEASONS = {
    12: "Winter", 1: "Winter", 2: "Winter",
    3: "Spring", 4: "Spring", 5: "Spring",
    6: "Summer", 7: "Summer", 8: "Summer",
    9: "Fall", 10: "Fall", 11: "Fall",
}

SEASON_ORDER = ["Winter", "Spring", "Summer", "Fall"]

RF_PARAM_GRID = {
    "n_estimators": [100, 300],
    "max_depth": [None, 5, 10],
    "max_features": ["sqrt", 1.0],
    "min_samples_leaf": [1, 5, 10],
}
RF_CV_FOLDS = 5
RANDOM_SEED = 42

# ── Colors ───────────────────────────────────────────────────────────────────
PRIMARY_COLOR = "#2E86C1"
ACCENT_COLOR = "#E63946"

SEASON_COLORS = {
    "Winter": "#264653",
    "Spring": "#2A9D8F",
    "Summer": "#E63946",
    "Fall": "#F4A261",
}

LINKAGE_COLORS = {
    "complete": "#2E86C1",
    "single": "#E63946",
    "average": "#2A9D8F",
}
