"""
Path Tracker - Pure pursuit path tracking for ground vehicles

Submodules:
    geometry            - Poses, velocities, angle and distance helpers
    planning            - Global path generation and local path windowing
    control             - Pure pursuit controller and tunable parameters
    transforms          - Frame transform lookup/broadcast capability
    path_publisher_node - ROS 2 node publishing global/local paths and errors
    path_tracker_node   - ROS 2 node turning local paths into velocity commands
"""

__version__ = '1.0.0'
