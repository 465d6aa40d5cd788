from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates the dump workflow:
1. Validates configuration and resolves the input target.
2. Loads the class database package (fatal on failure).
3. Classifies every input file from its header bytes.
4. Opens eligible files through the object store and locates their
   container-bearing objects (AssetBundle / ResourceManager).
5. Extracts, resolves and aggregates container rows per file.
6. Writes one report section per successfully processed file.

Each input file runs inside its own failure boundary: a malformed file is
recorded and the batch continues.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from assetpathdumper.core.analysis.aggregator import PathTypeAggregator
from assetpathdumper.core.analysis.classifier import classify_file
from assetpathdumper.core.analysis.extractor import ContainerExtractor
from assetpathdumper.core.analysis.resolver import TypeResolver
from assetpathdumper.core.pipeline.components.writer import write_report
from assetpathdumper.core.pipeline.validator import validate_config
from assetpathdumper.core.services.scanner import collect_input_files
from assetpathdumper.core.services.type_database import ClassDatabasePackage, TypeDatabaseCache
from assetpathdumper.domain.constants import ASSET_BUNDLE_CLASS, RESOURCE_MANAGER_CLASS
from assetpathdumper.domain.errors import (
    MissingContainerField,
    MissingEligibleObject,
    UnresolvableReference,
)
from assetpathdumper.domain.models import (
    FileClassification,
    FileFailure,
    FileReport,
    PipelineResult,
)
from assetpathdumper.domain.store import ObjectStore, StoreLoader

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        *,
        store_loader: Optional[StoreLoader] = None,
        type_cache: Optional[TypeDatabaseCache] = None,
) -> PipelineResult:
    """
    Execute the full dump pipeline.

    Args:
        config: The configuration dictionary (raw or partial).
        store_loader: Factory opening an object store for one input file.
                      Defaults to the UnityPy-backed store.
        type_cache: Pre-built type database context. When omitted, the class
                    package named by the configuration is loaded.

    Returns:
        PipelineResult: Report sections, counters and per-file failures.

    Raises:
        InvalidInputPath: If the input target does not exist.
        MissingClassDatabase: If the class package cannot be loaded.
        OSError: If the report file cannot be created.
    """
    logger.info("Pipeline execution started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    # -------------------------------------------------------------------------
    # 1) Fatal startup checks
    # -------------------------------------------------------------------------
    input_files = collect_input_files(cfg["input_path"])

    if type_cache is None:
        type_cache = TypeDatabaseCache(ClassDatabasePackage.load(cfg["class_package"]))

    if store_loader is None:
        from assetpathdumper.infra.unity_store import open_store
        store_loader = open_store

    # -------------------------------------------------------------------------
    # 2) Per-file processing
    # -------------------------------------------------------------------------
    reports: List[FileReport] = []
    failures: List[FileFailure] = []
    skipped = 0
    eligible_names = set(cfg["eligible_serialized_names"])
    report_path = cfg["report_path"]

    with open(report_path, "w", encoding="utf-8") as out:
        for file_path in input_files:
            file_name = os.path.basename(file_path)

            try:
                kind = classify_file(file_path, version_scan=cfg["version_scan"])
            except OSError as e:
                logger.error(f"Cannot read '{file_path}': {e}")
                failures.append(FileFailure(file_path, str(e)))
                continue

            if not is_eligible(file_name, kind, eligible_names):
                skipped += 1
                continue

            try:
                report = process_file(file_path, kind, store_loader, type_cache, cfg)
            except (MissingEligibleObject, MissingContainerField) as e:
                logger.info(f"Skipping '{file_name}': {e}")
                skipped += 1
                continue
            except Exception as e:
                logger.error(f"Failed to process '{file_path}': {e}")
                logger.debug("Failure details", exc_info=True)
                failures.append(FileFailure(file_path, str(e)))
                continue

            write_report(out, report)
            reports.append(report)
            logger.info(
                f"Processed '{file_name}': {len(report.index)} paths, "
                f"{report.entry_count} entries."
            )

    logger.info(
        f"Pipeline completed: {len(reports)} processed, {skipped} skipped, "
        f"{len(failures)} failed. Engine versions: {', '.join(type_cache.versions) or 'none'}."
    )
    return PipelineResult(
        input_path=os.path.abspath(cfg["input_path"]),
        report_path=report_path,
        reports=reports,
        scanned=len(input_files),
        skipped=skipped,
        failures=failures,
    )


def is_eligible(file_name: str, kind: FileClassification, eligible_names: set) -> bool:
    """Bundles are always processed; serialized files only by name."""
    if kind == FileClassification.BUNDLE_ARCHIVE:
        return True
    if kind == FileClassification.SERIALIZED_OBJECT_FILE:
        return file_name.lower() in eligible_names
    return False


def process_file(
        file_path: str,
        kind: FileClassification,
        store_loader: StoreLoader,
        type_cache: TypeDatabaseCache,
        cfg: Dict[str, Any],
) -> FileReport:
    """
    Build the report section of one eligible input file.

    Raises:
        MissingEligibleObject: If a serialized file has no ResourceManager.
        MissingContainerField: If the ResourceManager has no container table.
    """
    aggregator = PathTypeAggregator()

    with store_loader(file_path, kind) as store:
        if kind == FileClassification.BUNDLE_ARCHIVE:
            unresolved = _collect_bundle(store, aggregator, type_cache, cfg)
        else:
            unresolved = _collect_serialized(store, aggregator, type_cache, cfg)

    return FileReport(
        name=os.path.basename(file_path),
        source_path=file_path,
        kind=kind,
        index=aggregator.finalize(),
        unresolved=unresolved,
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _make_extractor(database: Any, cfg: Dict[str, Any]) -> ContainerExtractor:
    return ContainerExtractor(
        TypeResolver(database),
        unresolved_policy=cfg["unresolved_policy"],
        unknown_label=cfg["unknown_label"],
    )


def _collect_bundle(
        store: ObjectStore,
        aggregator: PathTypeAggregator,
        type_cache: TypeDatabaseCache,
        cfg: Dict[str, Any],
) -> int:
    """Aggregate the AssetBundle container of every serialized sub-file."""
    unresolved = 0

    for info in store.serialized_files():
        database = type_cache.load(info.engine_version)
        bundles = store.find_objects(info.name, database.class_id(ASSET_BUNDLE_CLASS))
        if not bundles:
            logger.debug(f"Sub-file '{info.name}' has no {ASSET_BUNDLE_CLASS} object; skipped.")
            continue

        extractor = _make_extractor(database, cfg)
        try:
            pairs = list(extractor.extract(bundles[0], store))
        except UnresolvableReference as e:
            logger.warning(f"Container of sub-file '{info.name}' is unreadable; skipped: {e}")
            continue

        aggregator.observe_all(pairs)
        unresolved += extractor.unresolved

    return unresolved


def _collect_serialized(
        store: ObjectStore,
        aggregator: PathTypeAggregator,
        type_cache: TypeDatabaseCache,
        cfg: Dict[str, Any],
) -> int:
    """Aggregate the ResourceManager container of a serialized object file."""
    files = store.serialized_files()
    if not files:
        raise MissingEligibleObject("<empty store>", RESOURCE_MANAGER_CLASS)

    info = files[0]
    database = type_cache.load(info.engine_version)
    managers = store.find_objects(info.name, database.class_id(RESOURCE_MANAGER_CLASS))
    if not managers:
        raise MissingEligibleObject(info.name, RESOURCE_MANAGER_CLASS)

    manager = managers[0]
    if not ContainerExtractor.has_container(manager):
        raise MissingContainerField(f"{RESOURCE_MANAGER_CLASS} in '{info.name}' has no container table.")

    extractor = _make_extractor(database, cfg)
    aggregator.observe_all(extractor.extract(manager, store))
    return extractor.unresolved
