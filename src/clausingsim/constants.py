"""
Tracer Constants and Reference Parameters

Lengths are dimensionless (any consistent unit); only ratios matter.
"""

# ==================== OUTCOME TAGS ====================

# Tracer state machine. TRACING is the only non-terminal state.
TRACING = 0
TRANSMITTED = 1
REFLECTED = 2
LOST = 3

OUTCOME_NAMES = {
    TRACING: "tracing",
    TRANSMITTED: "transmitted",
    REFLECTED: "reflected",
    LOST: "lost",
}

# ==================== TRACER SETTINGS ====================

# Wall strikes allowed before a particle is declared lost
MAX_COLLISIONS = 1000

# Relative slack on radius checks at internal planes
RADIAL_TOL = 1e-12

# Below this squared transverse speed the ray is treated as parallel to the axis
PARALLEL_TOL = 1e-24

# ==================== REFERENCE VALUES ====================

# Mean axial direction cosine of a cosine-law (Lambertian) source: <cos θ> = 2/3
COSINE_LAW_MEAN_VZ = 2.0 / 3.0

# Documented example grid pair
EXAMPLE_PARAMS = {
    "thick_screen": 1.0,
    "thick_accel": 0.5,
    "r_screen": 2.0,
    "r_accel": 1.0,
    "grid_space": 0.3,
    "npart": 10000,
}

# Reference results for EXAMPLE_PARAMS (screen- and accel-referenced
# transmission, downstream correction factor)
EXAMPLE_CLAUSING_FACTOR = 0.1955
EXAMPLE_ACCEL_CLAUSING_FACTOR = 0.782
EXAMPLE_DEN_COR = 0.937916

# Clausing (1932) transmission probabilities of a straight tube, indexed by L/R
CLAUSING_TABLE_L_OVER_R = (
    0.0, 0.1, 0.2, 0.4, 0.6, 0.8, 1.0, 1.5, 2.0, 3.0, 4.0, 5.0, 10.0, 20.0,
)
CLAUSING_TABLE_W = (
    1.0000, 0.9524, 0.9092, 0.8341, 0.7711, 0.7177, 0.6720,
    0.5810, 0.5142, 0.4200, 0.3566, 0.3105, 0.1910, 0.1094,
)
