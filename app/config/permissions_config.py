"""
Roles and Actions Configuration
Defines which user roles may perform which actions, and which actions also
require the actor to own (be assigned to) or author the target resource.
Consumed by app.core.policy.
"""

TRAINER = "trainer"
STUDENT = "student"

ROLES = {
    TRAINER: "Creates and manages workouts for students",
    STUDENT: "Consumes workouts assigned by a trainer",
}

# Ownership requirements
#   None      - role check only
#   "author"  - actor must have created the resource
#   "owner"   - actor must be the assigned student
#   "party"   - actor must be the assigned student or the author
#   "member"  - actor must be a participant of the resource
ACTIONS = {
    "workouts:create": {
        "roles": [TRAINER],
        "ownership": None,
        "description": "Create workouts for a student",
    },
    "workouts:manage": {
        "roles": [TRAINER],
        "ownership": None,
        "description": "Edit or delete workouts (ownership checked per workout)",
    },
    "workouts:list": {
        "roles": [TRAINER, STUDENT],
        "ownership": None,
        "description": "List own workouts (assigned or authored)",
    },
    "workouts:read": {
        "roles": [TRAINER, STUDENT],
        "ownership": "party",
        "description": "Read a single workout",
    },
    "workouts:export": {
        "roles": [TRAINER, STUDENT],
        "ownership": "party",
        "description": "Download a workout as PDF",
    },
    "workouts:update": {
        "roles": [TRAINER],
        "ownership": "author",
        "description": "Update a workout and replace its exercises",
    },
    "workouts:delete": {
        "roles": [TRAINER],
        "ownership": "author",
        "description": "Delete a workout and its exercises",
    },
    "users:list": {
        "roles": [TRAINER],
        "ownership": None,
        "description": "List user profiles",
    },
    "chat:open": {
        "roles": [TRAINER],
        "ownership": None,
        "description": "Open a chat room with a student",
    },
    "chat:read": {
        "roles": [TRAINER, STUDENT],
        "ownership": "member",
        "description": "Read messages of a room",
    },
    "chat:send": {
        "roles": [TRAINER, STUDENT],
        "ownership": "member",
        "description": "Send a message to a room",
    },
    "dashboard:student": {
        "roles": [STUDENT],
        "ownership": None,
        "description": "Student dashboard summary",
    },
    "payments:create": {
        "roles": [TRAINER, STUDENT],
        "ownership": None,
        "description": "Create a payment intent",
    },
}


def get_action_matrix():
    """
    Returns a flat list view of the matrix, e.g. for the /auth/me payload.
    Format: {"trainer": ["workouts:create", ...], "student": [...]}
    """
    matrix = {role: [] for role in ROLES}
    for action, config in ACTIONS.items():
        for role in config["roles"]:
            matrix[role].append(action)
    return {role: sorted(actions) for role, actions in matrix.items()}
