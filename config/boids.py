"""Configuration for the 3D obstacle-avoiding flock."""

WINDOW = {
    "width": 1280,
    "height": 720,
    "title": "Obstacle Flock"
}

CAMERA = {
    "fov": 45.0,
    "near_clip": 0.1,
    "far_clip": 200.0,
    "initial_radius": 30.0,
    "initial_theta": 90.0,     # Camera starts on the +z axis
    "initial_phi": 0.0,
    "min_radius": 5.0,
    "max_radius": 80.0,
    "min_phi": -89.0,
    "max_phi": 89.0,
    "keyboard_rotate_speed": 60.0,
    "keyboard_zoom_speed": 10.0,
    "mouse_sensitivity": 0.3
}

COLORS = {
    "background": (0.04, 0.04, 0.04, 1.0),
    "bounds": (0.25, 0.25, 0.28),
    "obstacle": (0.85, 0.85, 0.85),
    "boid": (0.95, 0.95, 0.95),
    "text": (0.9, 0.9, 0.9)
}

FLOCK = {
    "count": 50,
    "speed_limit": 0.08,
    "align_scale": 0.5,
    "cohesion_scale": 0.1,
    "separation_scale": 0.6,

    # Neighbor detection
    "sight_radius": 1.8,        # Shared by all three steering rules
    "separation_radius": 1.0,   # Active fleeing kicks in below this

    "spawn_extent": 3.0,        # Half-extent of the spawn cube
    "initial_heading": (0.0, 1.0, 0.0),
    "heading_nudge": 0.001,     # Added to velocity.x when the turn axis vanishes

    # "sequential": later boids see earlier boids' updates this frame
    # "snapshot": steering reads state copied at frame start
    "update_mode": "sequential",
}

ENVIRONMENT = {
    "bounding_name": "bounding",
    "bounding_size": (15.0, 15.0, 15.0),
    "wall_offset": 0.5,

    "obstacle_name": "obstacle",
    "obstacle_radius": 1.8,
    "obstacle_detail": 8,
    "obstacle_trigger": 0.5,    # Reverse when the forward ray hits closer than this
    "obstacle_double_sided": False,
}

BOID_MESH = {
    "radius": 0.35,
    "height": 1.0,
    "segments": 4
}
