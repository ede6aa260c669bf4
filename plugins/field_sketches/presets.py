"""
Field Sketch Presets

Each preset names the sketch type to instantiate ("marching", "life",
"flow", "ripple") plus the tunables that sketch reads. Sizes given as
*_frac are fractions of the larger frame dimension.
"""

PRESETS = {
    # =====================================================================
    # MARCHING SQUARES
    # =====================================================================
    "isolines": {
        "sketch": "marching",
        "name": "Isolines",
        "description": "Noise field contoured with marching squares",
        "resolution_frac": 0.02, "threshold": 0.0,
        "x_step": 0.1, "y_step": 0.1, "z_step": 0.03, "octaves": 8,
        "palette": "dusk", "glow": True,
    },
    "topo": {
        "sketch": "marching",
        "name": "Topographic",
        "description": "Fine contours over a slow, wide noise field",
        "resolution_frac": 0.01, "threshold": 0.0,
        "x_step": 0.04, "y_step": 0.04, "z_step": 0.01, "octaves": 4,
        "palette": "ink", "glow": False,
    },
    # =====================================================================
    # GAME OF LIFE
    # =====================================================================
    "life": {
        "sketch": "life",
        "name": "Game of Life",
        "description": "Conway B3/S23 on a wrapped grid with random births",
        "cell_frac": 0.01, "rule": "B3/S23",
        "sample_interval": 1.0, "trail": 0.4, "hue": 350,
        "glow": False,
    },
    "highlife": {
        "sketch": "life",
        "name": "HighLife",
        "description": "B36/S23 - self-replicating patterns",
        "cell_frac": 0.01, "rule": "B36/S23",
        "sample_interval": 1.0, "trail": 0.4, "hue": 200,
        "glow": False,
    },
    # =====================================================================
    # NOISE FLOW FIELD
    # =====================================================================
    "flow": {
        "sketch": "flow",
        "name": "Flow Field",
        "description": "Noise angles drawn as short strokes",
        "resolution": 25,
        "x_step": 0.01, "y_step": 0.01, "z_step": 0.003, "octaves": 8,
        "trail": 0.5, "glow": True,
    },
    # =====================================================================
    # RIPPLES
    # =====================================================================
    "ripple": {
        "sketch": "ripple",
        "name": "Ripple",
        "description": "Raindrops and a fish disturbing still water",
        "scale": 1, "damping": 0.88, "magnitude": 255.0,
        "fish_count": 1, "fish_radius": 1, "fish_speed": 0.8,
        "fish_interval": 0.55, "steer_with_noise": False,
        "rain_interval": 0.55, "rain_margin": 20,
        "gain": 1.0, "palette": "ocean", "glow": False,
    },
    "koi_pond": {
        "sketch": "ripple",
        "name": "Koi Pond",
        "description": "Noise-steered fish, light rain, slower decay",
        "scale": 2, "damping": 0.96, "magnitude": 255.0,
        "fish_count": 4, "fish_radius": 2, "fish_speed": 0.6,
        "fish_interval": 1.2, "steer_with_noise": True,
        "rain_interval": 2.0, "rain_margin": 10,
        "gain": 1.0, "palette": "ocean", "glow": True,
    },
}

# Preset order shown in the viewer, number keys 1-9 map here
PRESET_ORDER = [
    "isolines", "topo", "life", "highlife", "flow", "ripple", "koi_pond",
]

SKETCH_ORDER = ["marching", "life", "flow", "ripple"]


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def get_presets_for_sketch(sketch_name):
    """Return ordered list of preset keys for a sketch type."""
    return [k for k in PRESET_ORDER if PRESETS[k]["sketch"] == sketch_name]


def list_presets(sketch=None):
    """Return list of (key, name, description) for presets.
    If sketch is specified, filter to that sketch type only."""
    if sketch:
        keys = get_presets_for_sketch(sketch)
    else:
        keys = PRESET_ORDER
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in keys if k in PRESETS]
