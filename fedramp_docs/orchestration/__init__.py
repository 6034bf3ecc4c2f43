from fedramp_docs.orchestration.pipeline import build_result, run_ingestion

__all__ = ["build_result", "run_ingestion"]
