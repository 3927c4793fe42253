"""
Rooms of the "All Rooms" step and inference of their selection flags.

Older drafts were saved before rooms had explicit ``selected<Room>``
checkboxes. When a stored flag is missing, the room counts as selected if
any of its fields holds a value.
"""

from typing import Any, Dict, Mapping, NamedTuple, Sequence, Tuple

from plastic_audit.core.utils import is_blank


class Room(NamedTuple):
    key: str
    label: str
    flag: str
    fields: Tuple[str, ...]


ROOMS: Tuple[Room, ...] = (
    Room("classrooms", "Classrooms", "selectedClassrooms",
         ("classroomPensPencils", "classroomStationery", "classroomDisplayMaterials", "classroomOther")),
    Room("toilets", "Toilets", "selectedToilets",
         ("toiletSoapBottles", "toiletBinLiners", "toiletCupsPaper", "toiletPeriodProducts", "toiletOther")),
    Room("office", "Office", "selectedOffice",
         ("officePlasticBottles", "officePlasticCups", "officeStationery", "officeOther")),
    Room("library", "Library", "selectedLibrary",
         ("libraryPlasticBottles", "libraryStationery", "libraryDisplayMaterials", "libraryOther")),
    Room("gym", "Gym", "selectedGym",
         ("gymPlasticBottles", "gymSportEquipment", "gymOther")),
    Room("playground", "Playground", "selectedPlayground",
         ("playgroundPlasticBottles", "playgroundToysEquipment", "playgroundOther")),
    Room("corridors", "Corridors", "selectedCorridors",
         ("corridorsPlasticBottles", "corridorsDisplayMaterials", "corridorsBinLiners", "corridorsOther")),
    Room("scienceLabs", "Science Labs", "selectedScienceLabs",
         ("scienceLabsPlasticBottles", "scienceLabsLabEquipment", "scienceLabsOther")),
    Room("artRooms", "Art Rooms", "selectedArtRooms",
         ("artRoomsPlasticBottles", "artRoomsArtSupplies", "artRoomsOther")),
)

ROOM_FLAGS: Tuple[str, ...] = tuple(room.flag for room in ROOMS)


def infer_selection(section_data: Mapping[str, Any], field_names: Sequence[str]) -> bool:
    """
    True if any of the given fields was filled in.

    None and "" mean "never entered"; "0" is a real answer.
    """
    return any(not is_blank(section_data.get(name)) for name in field_names)


def apply_room_inference(section_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Fill in missing room flags of stored rooms-step data.

    A flag that is present, including an explicit False, is kept as is.

    Returns:
        A new dict with every room flag set
    """
    merged = dict(section_data)
    for room in ROOMS:
        if merged.get(room.flag) is None:
            merged[room.flag] = infer_selection(section_data, room.fields)
    return merged


def any_room_selected(section_data: Mapping[str, Any]) -> bool:
    return any(section_data.get(flag) is True for flag in ROOM_FLAGS)
