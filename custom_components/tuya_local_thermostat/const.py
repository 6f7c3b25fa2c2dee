DOMAIN = "tuya_local_thermostat"

CONF_LOCAL_KEY = "local_key"
CONF_PROTOCOL_VERSION = "protocol_version"
CONF_DIALECT = "dialect"
CONF_DISABLE_AFTER_SECONDS = "disable_after_seconds"

DEFAULT_SCAN_INTERVAL = 5  # seconds
DEFAULT_PROTOCOL_VERSION = "3.3"
PROTOCOL_VERSIONS = ["3.1", "3.2", "3.3", "3.4", "3.5"]

MANUFACTURER = "Tuya"

# Dialects (DP layouts) shipped by different firmware generations
DIALECT_V1 = "v1"  # half-degree layout, DP1/2/3/102
DIALECT_V2 = "v2"  # tenths layout, DP101/102/106/118
DEFAULT_DIALECT = DIALECT_V1

# Temperatures are kept as tenths of °C
MIN_TEMP_TENTHS = 100  # 10.0 °C, floor for every reading
MAX_TEMP_TENTHS = 350

UNIT_CELSIUS = "celsius"
UNIT_FAHRENHEIT = "fahrenheit"

SERVICE_SET_TEMPERATURE_UNIT = "set_temperature_unit"
ATTR_UNIT = "unit"
