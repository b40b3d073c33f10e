from .dns_checker import DNSProbe
from .whois_checker import WhoisPhrases, WhoisProbe
from .registrar_checker import RegistrarProbe
from .pipeline import PipelineState, ResolutionPipeline
from .bulk_resolver import BulkResolver
from .availability_service import AvailabilityService

__all__ = [
    'DNSProbe', 'WhoisPhrases', 'WhoisProbe', 'RegistrarProbe',
    'PipelineState', 'ResolutionPipeline', 'BulkResolver', 'AvailabilityService'
]
