# Record schemas decoded from the vendor feeds
from .oval import (
    Advisory,
    Criteria,
    Criterion,
    Definition,
    ExtendDefinition,
    OvalDefinitions,
    OvalObject,
    OvalState,
    OvalTest,
)
from .redhat_cve import CveSummary, RedHatCve

__all__ = [
    'Advisory',
    'Criteria',
    'Criterion',
    'Definition',
    'ExtendDefinition',
    'OvalDefinitions',
    'OvalObject',
    'OvalState',
    'OvalTest',
    'CveSummary',
    'RedHatCve',
]
