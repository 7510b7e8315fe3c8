"""Category analyzers for design audits."""

from .accessibility import audit_accessibility
from .performance import audit_performance
from .mobile_ux import audit_mobile_ux
from .visual_consistency import audit_visual_consistency
from .interaction_design import audit_interaction_design

__all__ = [
    "audit_accessibility",
    "audit_performance",
    "audit_mobile_ux",
    "audit_visual_consistency",
    "audit_interaction_design",
]
