"""
Constants and thresholds for the pit scouting assignment planner.
"""

# =============================================================================
# K-MEANS CLUSTERING
# =============================================================================
LLOYD_ITERATIONS = 10           # fixed number of assign/recenter rounds

# =============================================================================
# PROXIMITY REASSIGNMENT
# =============================================================================
PROXIMITY_MAX_PASSES = 5        # full passes over every team
VERY_CLOSE_DISTANCE = 150.0     # map units - "already adjacent" to another cluster
VERY_CLOSE_RATIO = 1.5          # move if closer by this ratio (very close case)
PROXIMITY_RATIO = 1.1           # move if closer by this ratio (normal case)
MAX_CLUSTER_SPREAD = 600.0      # map units - spread cap for destination cluster
VERY_CLOSE_MAX_SPREAD = 800.0   # map units - relaxed spread cap (very close case)
CLUSTER_SIZE_SLACK = 2          # allowed deviation from fair-share size

# =============================================================================
# GEOGRAPHIC SWAP OPTIMIZATION
# =============================================================================
SWAP_MAX_ITERATIONS = 3         # at most one swap applied per iteration
SWAP_NOISE_FLOOR = 10.0         # map units - minimum spread improvement

# =============================================================================
# ROUTE ORDERING
# =============================================================================
ROUTE_METHOD_NEAREST = "nearest_neighbor"
ROUTE_METHOD_ORTOOLS = "ortools"
ROUTE_METHODS = (ROUTE_METHOD_NEAREST, ROUTE_METHOD_ORTOOLS)
ROUTE_DISTANCE_SCALE = 100      # OR-Tools needs integer arc costs
ROUTE_TIME_LIMIT_SECONDS = 1

# =============================================================================
# ASSIGNMENT RECORDS
# =============================================================================
ASSIGNMENT_ID_SEPARATOR = "-"

# =============================================================================
# PIT MAP FIELDS
# =============================================================================
# Coordinate sources, checked in order: top-level x/y, then nested objects
PIT_COORDINATE_CONTAINERS = ("position", "center")
# Fields that may carry the team number inside a pit record
PIT_TEAM_FIELDS = ("team", "teamNumber", "team_number")

# =============================================================================
# DISPLAY
# =============================================================================
# Scouter palette (fill, border), assigned round-robin by roster index
SCOUTER_COLORS = [
    ((59, 130, 246), (29, 78, 216)),     # Blue
    ((16, 185, 129), (4, 120, 87)),      # Green
    ((139, 92, 246), (124, 58, 237)),    # Purple
    ((249, 115, 22), (234, 88, 12)),     # Orange
    ((236, 72, 153), (219, 39, 119)),    # Pink
    ((99, 102, 241), (79, 70, 229)),     # Indigo
    ((6, 182, 212), (8, 145, 178)),      # Cyan
    ((5, 150, 105), (4, 120, 87)),       # Emerald
]
UNASSIGNED_PIT_COLOR = (75, 85, 99)
COMPLETED_OUTLINE_COLOR = (250, 204, 21)
