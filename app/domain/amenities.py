"""Amenity catalogue offered to hosts."""

DEFAULT_AMENITIES = [
    {"name": "Wifi", "category": "essentials", "icon": "wifi"},
    {"name": "Điều hòa", "category": "essentials", "icon": "air"},
    {"name": "Tivi", "category": "essentials", "icon": "tv"},
    {"name": "Bếp", "category": "essentials", "icon": "kitchen"},
    {"name": "Máy giặt", "category": "essentials", "icon": "local_laundry_service"},
    {"name": "Bãi đậu xe", "category": "features", "icon": "local_parking"},
    {"name": "Thang máy", "category": "features", "icon": "elevator"},
    {"name": "Lò sưởi", "category": "features", "icon": "fireplace"},
    {"name": "Bể bơi", "category": "outdoor", "icon": "pool"},
    {"name": "Sân vườn", "category": "outdoor", "icon": "yard"},
    {"name": "Ban công", "category": "outdoor", "icon": "balcony"},
    {"name": "BBQ", "category": "outdoor", "icon": "outdoor_grill"},
    {"name": "Phòng gym", "category": "wellness", "icon": "fitness_center"},
    {"name": "Jacuzzi", "category": "wellness", "icon": "hot_tub"},
    {"name": "Sauna", "category": "wellness", "icon": "spa"},
]
