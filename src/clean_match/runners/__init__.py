from clean_match.runners.local import LocalLinkagePipeline

__all__ = ["LocalLinkagePipeline"]
