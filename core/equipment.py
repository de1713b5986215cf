"""Equipment recommendations by surface, distance and temperature."""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Tuple

from .models import SurfaceType


@dataclass(frozen=True)
class EquipmentRecommendation:
    """Gear advice for race day."""
    shoes: str
    clothing: str
    accessories: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shoes': self.shoes,
            'clothing': self.clothing,
            'accessories': list(self.accessories),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'EquipmentRecommendation':
        return cls(
            shoes=d['shoes'],
            clothing=d['clothing'],
            accessories=tuple(d.get('accessories', [])),
        )


def recommend_shoes(surface: SurfaceType, distance_km: float) -> str:
    # Trail advice wins over distance-based advice
    if surface == SurfaceType.TRAIL:
        return 'Trail shoes with good grip and protection.'
    if distance_km > 21:
        return 'Maximum-cushioning shoes for long distances.'
    return 'Versatile shoes with a good balance of cushioning and responsiveness.'


def recommend_clothing(temp_c: float) -> str:
    if temp_c > 25:
        return 'Light, light-coloured, highly breathable clothing.'
    elif temp_c > 15:
        return 'Technical t-shirt and shorts.'
    return 'Consider arm sleeves or a light long-sleeve shirt.'


def generate_equipment_recommendations(
    surface: SurfaceType,
    distance_km: float,
    temp_c: float
) -> EquipmentRecommendation:
    """
    Map race conditions to gear suggestions.

    Args:
        surface: Course surface
        distance_km: Race distance
        temp_c: Expected max temperature

    Returns:
        EquipmentRecommendation
    """
    accessories: List[str] = ['Cap or visor and sunglasses for UV protection.']
    if distance_km > 10:
        accessories.append('Hydration belt or vest if aid stations are sparse.')
    accessories.append('Wear sunscreen (WHO recommendation).')

    return EquipmentRecommendation(
        shoes=recommend_shoes(surface, distance_km),
        clothing=recommend_clothing(temp_c),
        accessories=tuple(accessories),
    )
