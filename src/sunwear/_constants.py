"""Internal constants shared across the library."""

WEATHER_PATH = "/weather"

KEY_WEATHER_ID = "KEY_WEATHER_ID"
KEY_MAX_TEMP = "KEY_MAX_TEMP"
KEY_MIN_TEMP = "KEY_MIN_TEMP"

#: Key of the disposable marker item the watch publishes after connecting.
KEY_BOOTSTRAP = "DATA"

#: Command understood by the phone-side service.
ACTION_UPDATE_WATCH_FACE = "ACTION_UPDATE_WATCH_FACE"

DEFAULT_NAMESPACE = "sunwear/default"
INTERACTIVE_UPDATE_RATE_S = 1.0
