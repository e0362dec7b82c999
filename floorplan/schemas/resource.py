from floorplan.schemas.common import StagedModel


class Resource(StagedModel):
    id: str
    name: str
