"""Game Profile - Per-game configuration loaded from games/<id>/game.json."""

import json
import os
import logging
from dataclasses import dataclass, field

import config

logger = logging.getLogger(__name__)

Point = tuple[int, int]

# Single interaction points for the 500x815 viewport
DEFAULT_ZONES: dict[str, Point] = {
    "map_tab": (250, 780),         # bottom navigation MAP button
    "popup_close": (250, 82),      # map header, closes a location popup
    "play_button": (250, 504),
    "enemy_target": (250, 150),
    "neutral": (250, 500),
    "drag_confirm": (250, 300),
    "end_turn": (250, 777),
    "continue_final": (339, 614),
}

# Ordered candidate lists, tried one after another
DEFAULT_ZONE_LISTS: dict[str, list[Point]] = {
    "reset": [(250, 150), (250, 400)],
    "end_turn_candidates": [(400, 750), (420, 760), (380, 740), (250, 777)],
    "continue_candidates": [
        (339, 614), (335, 610), (340, 620), (330, 600),
        (320, 614), (350, 614), (250, 614), (250, 550),
    ],
}

DEFAULT_MAP_POSITIONS: dict[str, Point] = {
    "TRAINING": (314, 569),
    "FOREST": (94, 528),
    "BRIDGE": (80, 429),
    "CAVES": (39, 317),
    "GHOST TOWN": (165, 295),
    "MOUNTAIN": (38, 198),
    "CASTLE": (264, 159),
}

# Card x positions by hand size, cards centered on x=250
DEFAULT_SLOT_LAYOUT: dict[int, list[int]] = {
    1: [250],
    2: [220, 290],
    3: [185, 250, 315],
    4: [155, 215, 285, 345],
    5: [130, 190, 250, 310, 370],
}

DEFAULT_CARD_Y = 690


def _point(value) -> Point:
    x, y = value
    return int(x), int(y)


@dataclass
class ViewportGeometry:
    """Named interaction zones for one canonical viewport size.

    Every coordinate is relative to ``width`` x ``height``. A surface of any
    other size invalidates the whole table; nothing is rescaled.
    """

    width: int = config.VIEWPORT_WIDTH
    height: int = config.VIEWPORT_HEIGHT
    zones: dict[str, Point] = field(default_factory=lambda: dict(DEFAULT_ZONES))
    zone_lists: dict[str, list[Point]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_ZONE_LISTS.items()}
    )
    map_positions: dict[str, Point] = field(
        default_factory=lambda: dict(DEFAULT_MAP_POSITIONS)
    )
    slot_layout: dict[int, list[int]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_SLOT_LAYOUT.items()}
    )
    card_y: int = DEFAULT_CARD_Y

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid viewport size {self.width}x{self.height}")
        self.slot_layout = {
            int(size): [int(x) for x in xs]
            for size, xs in self.slot_layout.items() if xs
        }
        if not self.slot_layout:
            raise ValueError("Slot layout table must define at least one hand size")

    def point(self, name: str) -> Point:
        """Return a named zone. Raises KeyError for unknown names."""
        return self.zones[name]

    def points(self, name: str) -> list[Point]:
        """Return a named list of candidate points (empty if undefined)."""
        return list(self.zone_lists.get(name, []))

    def map_position(self, location: str) -> Point | None:
        return self.map_positions.get(location)

    def slots_for(self, hand_size: int) -> list[int]:
        """Slot x coordinates for a hand size, clamped to the defined sizes."""
        sizes = sorted(self.slot_layout)
        clamped = min(max(hand_size, sizes[0]), sizes[-1])
        if clamped not in self.slot_layout:
            # Gap in the table: take the closest defined size
            clamped = min(sizes, key=lambda s: (abs(s - clamped), s))
        return list(self.slot_layout[clamped])

    def matches_surface(self, width: int, height: int) -> bool:
        return width == self.width and height == self.height


@dataclass
class GameProfile:
    """All game-specific configuration for one supported game.

    Loaded from ``games/<game_id>/game.json`` by :func:`load_game_profile`.
    Modules accept an optional ``game_profile`` parameter; when ``None``
    they fall back to their class-level defaults.
    """

    # Identity
    game_id: str = config.ACTIVE_GAME
    display_name: str = "Neura Knights"

    # Client
    base_url: str = config.BASE_URL
    home_url: str = config.HOME_URL
    auth_storage_prefix: str = config.AUTH_STORAGE_PREFIX
    auth_storage_key: str = config.AUTH_STORAGE_KEY
    user_agent: str = config.USER_AGENT

    # Map locations, easy to hard
    map_order: list[str] = field(default_factory=lambda: list(config.MAP_ORDER))

    # Perception marker overrides (empty = class defaults)
    popup_markers: list[str] = field(default_factory=list)
    terminal_markers: list[str] = field(default_factory=list)
    result_markers: list[str] = field(default_factory=list)

    geometry: ViewportGeometry = field(default_factory=ViewportGeometry)


def _load_geometry(data: dict) -> ViewportGeometry:
    defaults = ViewportGeometry()
    zones = dict(defaults.zones)
    zones.update({k: _point(v) for k, v in data.get("zones", {}).items()})
    zone_lists = dict(defaults.zone_lists)
    zone_lists.update({
        k: [_point(p) for p in v] for k, v in data.get("zone_lists", {}).items()
    })
    map_positions = dict(defaults.map_positions)
    map_positions.update({
        k: _point(v) for k, v in data.get("map_positions", {}).items()
    })
    slot_layout = defaults.slot_layout
    if "slot_layout" in data:
        # JSON object keys are strings
        slot_layout = {int(k): v for k, v in data["slot_layout"].items()}

    return ViewportGeometry(
        width=data.get("width", defaults.width),
        height=data.get("height", defaults.height),
        zones=zones,
        zone_lists=zone_lists,
        map_positions=map_positions,
        slot_layout=slot_layout,
        card_y=data.get("card_y", defaults.card_y),
    )


def load_game_profile(game_id: str,
                      games_dir: str = "games") -> GameProfile:
    """Load a GameProfile from ``games/<game_id>/game.json``.

    Keys missing from the JSON keep their defaults.

    Raises:
        FileNotFoundError: if the game directory or game.json is missing.
        ValueError: if the geometry section is invalid.
    """
    game_dir = os.path.join(games_dir, game_id)
    json_path = os.path.join(game_dir, "game.json")

    if not os.path.isfile(json_path):
        raise FileNotFoundError(
            f"Game profile not found: {json_path}"
        )

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    profile = GameProfile(
        game_id=game_id,
        display_name=data.get("display_name", game_id),
        base_url=data.get("base_url", config.BASE_URL),
        home_url=data.get("home_url", config.HOME_URL),
        auth_storage_prefix=data.get("auth_storage_prefix", config.AUTH_STORAGE_PREFIX),
        auth_storage_key=data.get("auth_storage_key", config.AUTH_STORAGE_KEY),
        user_agent=data.get("user_agent", config.USER_AGENT),
        map_order=data.get("map_order", list(config.MAP_ORDER)),
        popup_markers=data.get("popup_markers", []),
        terminal_markers=data.get("terminal_markers", []),
        result_markers=data.get("result_markers", []),
        geometry=_load_geometry(data.get("geometry", {})),
    )

    logger.info(f"Loaded game profile: {profile.display_name} ({game_id})")
    return profile


def list_games(games_dir: str = "games") -> list[str]:
    """Return sorted list of available game IDs.

    A game ID is a subdirectory of *games_dir* containing ``game.json``.
    """
    if not os.path.isdir(games_dir):
        return []
    ids = []
    for entry in sorted(os.listdir(games_dir)):
        path = os.path.join(games_dir, entry, "game.json")
        if os.path.isfile(path):
            ids.append(entry)
    return ids
