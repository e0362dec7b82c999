from floorplan.schemas.resource import Resource

# Static roster supplied by the hosting application; never mutated here.
DEFAULT_ROSTER: tuple[Resource, ...] = tuple(
    Resource(id=str(index), name=name)
    for index, name in enumerate(
        [
            "John Doe",
            "Jane Smith",
            "Bob Johnson",
            "Alice Brown",
            "Charlie Wilson",
            "Diana Martinez",
            "Edward Davis",
            "Fiona Garcia",
            "George Rodriguez",
            "Helen Lee",
            "Ian Taylor",
            "Julia Anderson",
            "Kevin Thompson",
            "Laura White",
            "Michael Harris",
        ],
        start=1,
    )
)
