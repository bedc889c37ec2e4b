from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

import config


class CropDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    growth_duration: int
    base_yield: int


class CropCatalog:
    """Static crop table: name -> growth duration and base yield.

    Lookups never fail. A name that is not in the table resolves to the
    default definition (short growth, yield 1) under the requested name.
    """

    def __init__(self, crops: Optional[Dict[str, dict]] = None, default: Optional[dict] = None):
        crops = config.CROPS if crops is None else crops
        default = config.DEFAULT_CROP if default is None else default
        self._crops: Dict[str, CropDefinition] = {
            name: CropDefinition(name=name, **entry) for name, entry in crops.items()
        }
        self._default_duration = default["growth_duration"]
        self._default_yield = default["base_yield"]

    def is_known(self, name: str) -> bool:
        return name in self._crops

    def lookup(self, name: str) -> CropDefinition:
        crop = self._crops.get(name)
        if crop is not None:
            return crop
        return CropDefinition(name=name, growth_duration=self._default_duration, base_yield=self._default_yield)

    def names(self) -> List[str]:
        return list(self._crops)
