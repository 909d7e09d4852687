"""CLI entry point for context-provider."""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from context_provider.chunkers import SentenceChunker
from context_provider.config import CONFIG_FILENAME, ModelConfig, WorkspaceConfig
from context_provider.embedders import create_embedder
from context_provider.errors import FatalConfigError
from context_provider.pipeline import EmbeddingPipeline
from context_provider.scanner import WorkspaceScanner
from context_provider.storage import RunMetadata, write_results

logger = logging.getLogger(__name__)


def init(
    workspace: str,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
    overlap: Optional[int] = None,
    force: bool = False,
    cache_dir: Optional[str] = None,
) -> int:
    """Write a default configuration file into a workspace.

    Args:
        workspace: Path to the workspace directory
        model: Embedding model to record in the config
        max_tokens: Chunk budget in approximate tokens
        overlap: Overlap carried into the next chunk
        force: Overwrite an existing configuration
        cache_dir: Model cache directory to record in the config
    """
    workspace_path = Path(workspace)
    if not workspace_path.is_dir():
        logger.error(f"Workspace path does not exist: {workspace}")
        return 1

    config_path = workspace_path / CONFIG_FILENAME
    if config_path.exists() and not force:
        logger.warning("Workspace already initialized")
        logger.info("Use --force to reinitialize")
        return 0

    try:
        config = _apply_overrides(
            WorkspaceConfig(), model, max_tokens, overlap, quantized=False, cache_dir=cache_dir
        )
    except FatalConfigError as exc:
        logger.error(f"Invalid settings: {exc}")
        return 1

    config.save(workspace_path)
    config.model.cache_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Configuration saved to: {config_path}")
    logger.info(f"  Model: {config.model.model}")
    logger.info(f"  Cache: {config.model.cache_dir}")
    logger.info(f"  Max tokens per chunk: {config.settings.max_tokens}")
    logger.info(f"  Overlap tokens: {config.settings.overlap}")
    return 0


def process(
    workspace: str,
    output: str,
    model: Optional[str] = None,
    max_tokens: Optional[int] = None,
    overlap: Optional[int] = None,
    quantized: bool = False,
    cache_dir: Optional[str] = None,
) -> int:
    """Scan a workspace, embed its files, and write the results.

    Args:
        workspace: Path to the workspace directory
        output: Directory for embeddings.json and metadata.json
    """
    workspace_path = Path(workspace)
    try:
        config = WorkspaceConfig.load(workspace_path)
        config = _apply_overrides(config, model, max_tokens, overlap, quantized, cache_dir)

        logger.info(f"Workspace: {workspace_path}")
        logger.info(f"Output: {output}")
        logger.info(f"Model: {config.model.model}")

        files = WorkspaceScanner(workspace_path, config.settings).scan_files()

        chunker = SentenceChunker(config.settings.max_tokens, config.settings.overlap)
        pipeline = EmbeddingPipeline(create_embedder(config.model), chunker)
        results = pipeline.process_files(files)
    except FatalConfigError as exc:
        logger.error(f"Error processing workspace: {exc}")
        return 1

    metadata = RunMetadata(
        workspace=str(workspace_path.resolve()),
        model=config.model.model,
        total_files=len(files),
        max_tokens=config.settings.max_tokens,
        overlap=config.settings.overlap,
        model_cache=str(config.model.cache_dir),
    )
    embeddings_path, metadata_path = write_results(output, results, metadata)

    logger.info("")
    logger.info(f"Generated embeddings for {len(results)} chunks")
    if pipeline.summary.failed_files:
        logger.warning(f"{pipeline.summary.files_failed} files failed to process")
    logger.info(f"Embeddings saved to: {embeddings_path}")
    logger.info(f"Metadata saved to: {metadata_path}")
    return 0


def scan(workspace: str) -> int:
    """Print the workspace files that would be processed."""
    workspace_path = Path(workspace)
    try:
        config = WorkspaceConfig.load(workspace_path)
        files = WorkspaceScanner(workspace_path, config.settings).scan_files()
    except FatalConfigError as exc:
        logger.error(f"Error scanning workspace: {exc}")
        return 1

    for record in files:
        print(record.relative_path)
    return 0


def _apply_overrides(
    config: WorkspaceConfig,
    model: Optional[str],
    max_tokens: Optional[int],
    overlap: Optional[int],
    quantized: bool,
    cache_dir: Optional[str] = None,
) -> WorkspaceConfig:
    """Command-line values win over the workspace configuration."""
    model_config: ModelConfig = config.model
    if model:
        model_config = replace(model_config, model=model)
    if quantized:
        model_config = replace(model_config, quantized=True)
    if cache_dir:
        model_config = replace(model_config, cache_dir=Path(cache_dir).expanduser())

    settings = config.settings
    if max_tokens is not None:
        settings = replace(settings, max_tokens=max_tokens)
    if overlap is not None:
        settings = replace(settings, overlap=overlap)

    return replace(config, model=model_config, settings=settings)


def _add_chunking_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-w", "--workspace", default=".", help="Path to workspace directory")
    parser.add_argument("-m", "--model", help="Embedding model to use")
    parser.add_argument("--max-tokens", type=int, help="Maximum tokens per chunk (default: 512)")
    parser.add_argument("--overlap", type=int, help="Overlap between chunks (default: 50)")
    parser.add_argument("--cache-dir", help="Model cache directory")


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="context-provider",
        description="Convert a workspace into text chunks with vector embeddings",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # init command
    init_parser = subparsers.add_parser(
        "init",
        help=f"Write a default {CONFIG_FILENAME} into the workspace",
    )
    _add_chunking_options(init_parser)
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration",
    )

    # process command
    process_parser = subparsers.add_parser(
        "process",
        help="Process workspace and generate embeddings",
    )
    _add_chunking_options(process_parser)
    process_parser.add_argument(
        "-o",
        "--output",
        default="./embeddings",
        help="Output directory for embeddings (default: ./embeddings)",
    )
    process_parser.add_argument(
        "--quantized",
        action="store_true",
        help="Quantize the model to int8 after loading",
    )

    # scan command
    scan_parser = subparsers.add_parser(
        "scan",
        help="List the files that would be processed",
    )
    scan_parser.add_argument("-w", "--workspace", default=".", help="Path to workspace directory")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    if args.command == "init":
        code = init(
            args.workspace,
            args.model,
            args.max_tokens,
            args.overlap,
            args.force,
            args.cache_dir,
        )
    elif args.command == "process":
        code = process(
            args.workspace,
            args.output,
            args.model,
            args.max_tokens,
            args.overlap,
            args.quantized,
            args.cache_dir,
        )
    else:
        code = scan(args.workspace)

    sys.exit(code)


if __name__ == "__main__":
    main()
