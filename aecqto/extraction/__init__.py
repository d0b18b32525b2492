"""Loaders that decode source graphs into MetaObjects.

The IFC loader lives in :mod:`aecqto.extraction.ifc_loader` and is imported
explicitly because it needs the optional ifcopenshell dependency.
"""

from aecqto.extraction.loader import load_meta_objects, load_meta_objects_file, meta_object_from_dict

__all__ = ["load_meta_objects", "load_meta_objects_file", "meta_object_from_dict"]
