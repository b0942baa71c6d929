from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# (latitude, longitude); serialized as a two-element JSON array
LatLng = tuple[float, float]


class APIModel(BaseModel):
    """Base model for JSON exchanged with the browser UI (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
