APP_TITLE = "Freight Dashboard"

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
YTD = "YTD"
MONTHS_WITH_YTD = MONTHS + [YTD]
YEAR_OPTIONS = [2025, 2026, 2027, 2028, 2029, 2030]

UNASSIGNED = "(Unassigned)"
OTHERS = "Others"

DEFAULT_COMPANIES = [
    "COWBOYS", "CRANE", "FLORIDA FREIGHT", "KOL", "PHOENIX FREIGHT",
    "NEVILLE", "SPI", "TAZ", "UP&GO", "YOPO", "Logistify",
    "ALG", "PC EXPRESS", "EXOTIC RETAILERS", "ON Spot (neville)",
]
DEFAULT_AGENTS = [
    "J.HOLLAND", "M.KAIGLER", "S.MCDEVITT", "D.MERCHUT", "P.VANDENBRINK",
    "J.SCALERA", "D.BATTISTA", "A.SUFKA", "B.DELLAGIOVANNA", "S.CLARK",
    "E.LOWERY", "S.GRAVES", "M.STONE", "A.MACCANICO",
]
DEFAULT_LOCATIONS = [
    "Rentex-Anaheim", "Rentex-Boston", "Rentex Chicago", "Rentex Ft. Lauderdale",
    "Rentex Las Vegas", "Rentex-Nashville", "Rentex NY/NJ", "Rentex Orlando",
    "Rentex Philadelphia", "Rentex Phoenix", "Rentex San Francisco", "Rentex Washington DC",
]
DEFAULT_CITIES = [
    "New York", "Los Angeles", "Chicago", "Houston", "Phoenix",
    "Philadelphia", "San Antonio", "San Diego", "Dallas", "San Jose",
    "Austin", "Jacksonville", "Fort Worth", "Columbus", "Charlotte",
    "San Francisco", "Indianapolis", "Seattle", "Denver", "Washington DC",
    "Boston", "El Paso", "Nashville", "Detroit", "Oklahoma City",
    "Portland", "Las Vegas", "Memphis", "Louisville", "Baltimore",
    "Milwaukee", "Albuquerque", "Tucson", "Fresno", "Sacramento",
    "Kansas City", "Mesa", "Atlanta", "Omaha", "Colorado Springs",
    "Raleigh", "Miami", "Long Beach", "Virginia Beach", "Oakland",
    "Minneapolis", "Tulsa", "Tampa", "Arlington", "New Orleans",
]
DEFAULT_REFERENCES = {
    "companies": DEFAULT_COMPANIES,
    "agents": DEFAULT_AGENTS,
    "locations": DEFAULT_LOCATIONS,
    "cities": DEFAULT_CITIES,
}

SHIP_METHODS = [
    "Round Trip", "One Way", "Daily rate",
    "SWA Last Mile - Round Trip", "FAIR Last Mile - Round Trip",
    "SWA Last Mile - One Way", "FAIR Last Mile - One Way",
]
VEHICLE_TYPES = ["Trailer", "Sprinter Van", "Box Truck"]

# stored document key -> DataFrame column
FIELD_MAP = {
    "id": "id",
    "refNum": "ref_num",
    "client": "client",
    "shipDate": "ship_date",
    "returnDate": "return_date",
    "location": "location",
    "returnLocation": "return_location",
    "city": "city",
    "state": "state",
    "company": "company",
    "shipMethod": "ship_method",
    "vehicleType": "vehicle_type",
    "shippingCharge": "shipping_charge",
    "po": "po",
    "agent": "agent",
}
SHIPMENT_COLS = list(FIELD_MAP.values())
TEXT_COLS = [c for c in SHIPMENT_COLS if c not in ("id", "shipping_charge")]
DATE_COLS = ["ship_date", "return_date"]

DIMENSIONS = {
    "company": "Company",
    "agent": "Agent",
    "client": "Client",
    "city": "City",
    "state": "State",
    "location": "Location",
    "ship_method": "Ship Method",
    "vehicle_type": "Vehicle Type",
}

# (header, column) in workbook order
EXCEL_COLUMNS = [
    ("Reference #", "ref_num"),
    ("Client", "client"),
    ("Ship Date", "ship_date"),
    ("Return Date", "return_date"),
    ("Location", "location"),
    ("Return Location", "return_location"),
    ("City", "city"),
    ("State", "state"),
    ("Company", "company"),
    ("Ship Method", "ship_method"),
    ("Vehicle Type", "vehicle_type"),
    ("Charges", "shipping_charge"),
    ("PO", "po"),
    ("Agent", "agent"),
]
CURRENCY_FORMAT = "$#,##0.00"

QUICK_FILTERS = {
    "all": "All",
    "top10": "Top 10%",
    "top25": "Top 25%",
    "bottom25": "Bottom 25%",
}
CHART_TYPES = ["bar", "line", "pie", "area"]
MAX_COMPARE = 5

COLORS = [
    "#3b82f6", "#8b5cf6", "#ec4899", "#f59e0b", "#10b981",
    "#06b6d4", "#6366f1", "#f97316", "#14b8a6", "#f43f5e",
]

KPI_FORMATS = {
    "total_revenue": "${:,.2f}",
    "total_shipments": "{:,}",
    "avg_per_shipment": "${:,.2f}",
    "active_entities": "{:,}",
}

CONFIG_DOC = "freight-config/global"
DATA_COLLECTION = "freight-data"
