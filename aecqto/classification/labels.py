"""Display labels for common IFC categories (Catalan, Spanish, English)."""

from __future__ import annotations

_LABELS: dict[str, dict[str, str]] = {
    "IfcWall": {"ca": "Mur", "es": "Muro", "en": "Wall"},
    "IfcWallStandardCase": {"ca": "Mur", "es": "Muro", "en": "Wall"},
    "IfcCurtainWall": {"ca": "Mur cortina", "es": "Muro cortina", "en": "Curtain wall"},
    "IfcSlab": {"ca": "Llosa", "es": "Losa", "en": "Slab"},
    "IfcRoof": {"ca": "Coberta", "es": "Cubierta", "en": "Roof"},
    "IfcCovering": {"ca": "Revestiment", "es": "Revestimiento", "en": "Covering"},
    "IfcDoor": {"ca": "Porta", "es": "Puerta", "en": "Door"},
    "IfcWindow": {"ca": "Finestra", "es": "Ventana", "en": "Window"},
    "IfcColumn": {"ca": "Pilar", "es": "Pilar", "en": "Column"},
    "IfcBeam": {"ca": "Biga", "es": "Viga", "en": "Beam"},
    "IfcMember": {"ca": "Element estructural", "es": "Elemento estructural", "en": "Member"},
    "IfcPlate": {"ca": "Placa", "es": "Placa", "en": "Plate"},
    "IfcFooting": {"ca": "Fonamentació", "es": "Cimentación", "en": "Footing"},
    "IfcPile": {"ca": "Pilot", "es": "Pilote", "en": "Pile"},
    "IfcStair": {"ca": "Escala", "es": "Escalera", "en": "Stair"},
    "IfcStairFlight": {"ca": "Tram d'escala", "es": "Tramo de escalera", "en": "Stair flight"},
    "IfcRamp": {"ca": "Rampa", "es": "Rampa", "en": "Ramp"},
    "IfcRailing": {"ca": "Barana", "es": "Barandilla", "en": "Railing"},
    "IfcFurnishingElement": {"ca": "Mobiliari", "es": "Mobiliario", "en": "Furnishing"},
    "IfcFlowTerminal": {"ca": "Terminal d'instal·lació", "es": "Terminal de instalación", "en": "Flow terminal"},
    "IfcFlowSegment": {"ca": "Tram d'instal·lació", "es": "Tramo de instalación", "en": "Flow segment"},
    "IfcSpace": {"ca": "Espai", "es": "Espacio", "en": "Space"},
    "IfcBuildingElementProxy": {"ca": "Element genèric", "es": "Elemento genérico", "en": "Generic element"},
}


def category_label(ifc_class: str, language: str = "ca") -> str:
    """Human label for an IFC class; the class name itself when unknown."""
    labels = _LABELS.get(ifc_class)
    if labels is None:
        return ifc_class
    return labels.get(language) or labels["en"]
