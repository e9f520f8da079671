"""
Eligibility Analysis Package.

Modules:
    - ``modifiers``: Three-way classification of a method's declared modifiers.
    - ``instance_refs``: Scanning of a method body for instance state references.
"""

from staticize.analysis.instance_refs import InstanceReferenceScanner, has_instance_reference
from staticize.analysis.modifiers import classify_modifiers

__all__ = ["InstanceReferenceScanner", "classify_modifiers", "has_instance_reference"]
