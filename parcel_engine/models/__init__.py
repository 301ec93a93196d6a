"""Domain models for parcel subdivision and installment pricing."""

from parcel_engine.models.enums import (
    FlexibleItemType,
    GenerationMode,
    PieceStatus,
    SmartStrategy,
)
from parcel_engine.models.land import Batch, GeneratedPiece, PieceBlueprint, SubdivisionPlan
from parcel_engine.models.offer import (
    InstallmentDue,
    PaymentOffer,
    ResolvedFullPayment,
    ResolvedInstallment,
    SaleTerm,
)
from parcel_engine.models.specs import (
    AdvancedSpec,
    AutoItem,
    AutoSmartItem,
    AutoSpec,
    CustomFlexibleSpec,
    CustomItem,
    GenerationSpec,
    MixedSpec,
    PieceConfig,
    SmartItem,
    SmartSpec,
    UniformSpec,
    spec_from_dict,
)

__all__ = [
    "AdvancedSpec",
    "AutoItem",
    "AutoSmartItem",
    "AutoSpec",
    "Batch",
    "CustomFlexibleSpec",
    "CustomItem",
    "FlexibleItemType",
    "GeneratedPiece",
    "GenerationMode",
    "GenerationSpec",
    "InstallmentDue",
    "MixedSpec",
    "PaymentOffer",
    "PieceBlueprint",
    "PieceConfig",
    "PieceStatus",
    "ResolvedFullPayment",
    "ResolvedInstallment",
    "SaleTerm",
    "SmartItem",
    "SmartSpec",
    "SmartStrategy",
    "SubdivisionPlan",
    "UniformSpec",
    "spec_from_dict",
]
