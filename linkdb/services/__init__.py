from linkdb.services.metadata import ExtractionResult, MetadataService

__all__ = ["ExtractionResult", "MetadataService"]
