"""Default asset types and the sample floors for a fresh database."""
import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from floorplan.repositories.asset_type_repo import AssetTypeRepository
from floorplan.repositories.floor_repo import FloorRepository

logger = logging.getLogger(__name__)


def _rect(x, y, width, height, fill, stroke, **extra):
    return {"type": "rect", "x": x, "y": y, "width": width, "height": height,
            "fill": fill, "stroke": stroke, "strokeWidth": 2, **extra}


def _circle(cx, cy, r, fill, **extra):
    return {"type": "circle", "cx": cx, "cy": cy, "r": r, "fill": fill, **extra}


def _line(x1, y1, x2, y2, stroke):
    return {"type": "line", "x1": x1, "y1": y1, "x2": x2, "y2": y2, "stroke": stroke, "strokeWidth": 2}


ASSET_TYPE_ICONS = {
    "Chair": [
        _rect(-15, -15, 30, 30, "#8B4513", "#654321", rx=3),
        _rect(-15, -20, 30, 5, "#8B4513", "#654321"),
    ],
    "Desk": [
        _rect(-50, -30, 100, 60, "#8B7355", "#654321", rx=4),
        _rect(-45, -25, 35, 20, "#A0826D", "#654321"),
    ],
    "Table": [
        _rect(-60, -40, 120, 80, "#D2691E", "#8B4513", rx=5),
        *[_circle(cx, cy, 3, "#8B4513") for cx in (-40, 40) for cy in (-20, 20)],
    ],
    "Cabinet": [
        _rect(-25, -35, 50, 70, "#696969", "#404040", rx=3),
        _line(-25, 0, 25, 0, "#404040"),
        _circle(15, -17, 3, "#C0C0C0"),
        _circle(15, 17, 3, "#C0C0C0"),
    ],
    "Plant": [
        _rect(-15, 10, 30, 20, "#8B4513", "#654321"),
        _circle(0, 0, 20, "#228B22", stroke="#006400", strokeWidth=2),
        _circle(-8, -5, 10, "#32CD32", opacity=0.7),
        _circle(8, -5, 10, "#32CD32", opacity=0.7),
    ],
    "Door": [
        _rect(-5, -40, 10, 80, "#8B4513", "#654321"),
        _circle(8, 0, 3, "#FFD700", stroke="#DAA520", strokeWidth=1),
    ],
    "Window": [
        _rect(-40, -5, 80, 10, "#87CEEB", "#4682B4", opacity=0.6),
        _line(-40, 0, 40, 0, "#4682B4"),
        _line(0, -5, 0, 5, "#4682B4"),
    ],
}

# (id, type, x, y, rotation, label, assigned_to)
SAMPLE_FLOORS = [
    {
        "id": "floor-1",
        "name": "First Floor - Main Office",
        "width": 1000,
        "height": 600,
        "items": [
            ("desk-1", "Desk", 150, 150, 0, "Desk 1", "1"),
            ("desk-2", "Desk", 350, 150, 0, "Desk 2", "2"),
            ("desk-3", "Desk", 550, 150, 0, "Desk 3", "3"),
            ("desk-4", "Desk", 750, 150, 0, "Desk 4", "4"),
            ("chair-1", "Chair", 150, 250, 180, "C1", None),
            ("chair-2", "Chair", 350, 250, 180, "C2", None),
            ("chair-3", "Chair", 550, 250, 180, "C3", None),
            ("chair-4", "Chair", 750, 250, 180, "C4", None),
            ("table-1", "Table", 200, 450, 0, "Meeting Table", None),
            ("chair-5", "Chair", 140, 420, 90, None, None),
            ("chair-6", "Chair", 260, 420, 90, None, None),
            ("chair-7", "Chair", 140, 480, 270, None, None),
            ("chair-8", "Chair", 260, 480, 270, None, None),
            ("cabinet-1", "Cabinet", 900, 150, 0, "Storage", None),
            ("cabinet-2", "Cabinet", 900, 300, 0, "Files", None),
            ("plant-1", "Plant", 50, 50, 0, None, None),
            ("plant-2", "Plant", 950, 50, 0, None, None),
            ("plant-3", "Plant", 500, 550, 0, None, None),
            ("door-1", "Door", 50, 300, 0, "Main Entrance", None),
            ("door-2", "Door", 950, 500, 0, "Exit", None),
            ("window-1", "Window", 200, 30, 0, None, None),
            ("window-2", "Window", 500, 30, 0, None, None),
            ("window-3", "Window", 800, 30, 0, None, None),
        ],
    },
    {
        "id": "floor-2",
        "name": "Second Floor - Conference Area",
        "width": 1000,
        "height": 600,
        "items": [
            ("table-2", "Table", 500, 300, 0, "Conference Table", None),
            ("chair-21", "Chair", 420, 240, 180, None, None),
            ("chair-22", "Chair", 500, 240, 180, None, None),
            ("chair-23", "Chair", 580, 240, 180, None, None),
            ("chair-24", "Chair", 420, 360, 0, None, None),
            ("chair-25", "Chair", 500, 360, 0, None, None),
            ("chair-26", "Chair", 580, 360, 0, None, None),
            ("table-3", "Table", 150, 150, 0, "Break Area", None),
            ("cabinet-21", "Cabinet", 850, 150, 0, "Supplies", None),
            ("cabinet-22", "Cabinet", 850, 300, 0, "AV Equipment", None),
            ("plant-21", "Plant", 100, 450, 0, None, None),
            ("plant-22", "Plant", 900, 450, 0, None, None),
            ("door-21", "Door", 50, 300, 0, "Entrance", None),
            ("window-21", "Window", 300, 30, 0, None, None),
            ("window-22", "Window", 700, 30, 0, None, None),
        ],
    },
    {
        "id": "floor-3",
        "name": "Third Floor - Open Workspace",
        "width": 1000,
        "height": 600,
        "items": [
            ("desk-31", "Desk", 200, 150, 0, "Desk A1", "5"),
            ("desk-32", "Desk", 400, 150, 0, "Desk A2", "6"),
            ("desk-33", "Desk", 200, 300, 180, "Desk B1", "7"),
            ("desk-34", "Desk", 400, 300, 180, "Desk B2", "8"),
            ("desk-35", "Desk", 700, 200, 0, "Standing Desk 1", None),
            ("desk-36", "Desk", 700, 400, 0, "Standing Desk 2", None),
            ("table-31", "Table", 300, 500, 0, "Collab Space", None),
            ("cabinet-31", "Cabinet", 900, 100, 0, "Resources", None),
            ("plant-31", "Plant", 100, 100, 0, None, None),
            ("plant-32", "Plant", 600, 100, 0, None, None),
            ("plant-33", "Plant", 900, 500, 0, None, None),
            ("door-31", "Door", 500, 570, 90, "Main Entry", None),
            ("window-31", "Window", 200, 30, 0, None, None),
            ("window-32", "Window", 500, 30, 0, None, None),
            ("window-33", "Window", 800, 30, 0, None, None),
        ],
    },
]


async def seed(session: AsyncSession) -> dict[str, int]:
    """Insert missing default asset types and sample floors. Safe to run repeatedly."""
    type_repo = AssetTypeRepository(session)
    created_types = 0
    for name, elements in ASSET_TYPE_ICONS.items():
        if await type_repo.get_by_name(name):
            continue
        icon = {"type": name.lower(), "elements": elements}
        await type_repo.create(name=name, icon_definition=json.dumps(icon))
        created_types += 1
        logger.info("Created asset type %s", name)

    floor_repo = FloorRepository(session)
    created_items = 0
    for floor in SAMPLE_FLOORS:
        if await floor_repo.get(floor["id"]) is not None:
            continue
        await floor_repo.upsert(floor["id"], name=floor["name"], width=floor["width"], height=floor["height"])
        rows = [
            {"id": item_id, "type": kind, "pos_x": x, "pos_y": y, "rotation": rotation,
             "label": label, "assigned_to": assigned_to}
            for item_id, kind, x, y, rotation, label, assigned_to in floor["items"]
        ]
        created_items += await floor_repo.replace_items(floor["id"], rows)
        logger.info("Created floor %s with %d items", floor["id"], len(rows))

    await session.commit()
    return {"asset_types": created_types, "floor_items": created_items}
