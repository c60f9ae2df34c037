"""
Pit scouting assignment planner: spatial clustering, sequential blocks and
manual assignment over a shared assignment record model.
"""
from pitplan.constants import *
from pitplan.config import ClusteringConfig
from pitplan.records import (
    Assignment,
    AssignmentMode,
    TeamPosition,
    assignment_id,
    load_assignments,
    save_assignments,
)
from pitplan.geometry import cluster_spread, distance
from pitplan.extractor import ExtractionResult, extract_team_positions
from pitplan.clustering import ClusteringResult, SpatialClusterer, create_spatial_clusters
from pitplan.sequential import create_sequential_assignments, fair_share_sizes
from pitplan.assignment import (
    PlanResult,
    add_manual_assignment,
    assignments_by_scouter,
    clear_assignments,
    create_pit_assignments,
    plan_pit_assignments,
    remove_manual_assignment,
    toggle_assignment_completed,
)
from pitplan.completion import ScoutedTeamsOracle, reconcile_completion
from pitplan.report import (
    AssignmentProgress,
    export_csv,
    format_plan_report,
    progress_summary,
    scouter_progress,
)
