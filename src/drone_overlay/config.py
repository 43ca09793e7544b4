import pydantic_settings


class OverlayConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_prefix="DRONE_OVERLAY_")

    # --- Camera ---
    # Units: Degrees (diagonal)
    FIELD_OF_VIEW_DEG: float = 59.0

    # --- Telemetry ---
    FEET_TO_METERS: float = 0.3048
    # Units: Hz (one flight log row every 0.1 s)
    SAMPLE_RATE_HZ: float = 10.0

    # --- Placeholder footprint ---
    # Units: Degrees (half side of the square, ~78 m at the equator)
    PLACEMENT_OFFSET_DEG: float = 0.0007

    # --- Video player defaults, applied once per session ---
    VIDEO_LOOP: bool = True
    VIDEO_PLAYBACK_RATE: float = 4.0

    # --- Rendering surface ---
    MAP_STYLE: str = "mapbox://styles/mapbox/streets-v11"
    # Units: Pixels
    FIT_BOUNDS_PADDING_PX: int = 50

    OVERLAY_SOURCE_ID: str = "video"
    PATH_SOURCE_ID: str = "dronePath"
    PATH_LAYER_ID: str = "droneOutline"
    PATH_LINE_COLOR: str = "#6706CE"
    PATH_LINE_WIDTH: float = 3.0
