"""
Locate command implementation.

Prints the repository coordinates of an IDE artifact without downloading it.
"""

from ijplatformkit.artifacts.product import ArtifactVariant, RequestedArtifact, product_from_code
from ijplatformkit.cli.utils import create_locator, format_details, load_kit_config


def run(args) -> int:
    """
    Run the locate command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = load_kit_config(args)
    locator = create_locator(config)
    variant = ArtifactVariant.INSTALLER if args.installer else ArtifactVariant.ARCHIVE
    request = RequestedArtifact(product_from_code(args.code), args.ide_version, variant)

    location = locator.locate_request(request, sources=args.sources)

    details = {
        "Coordinates": location.coordinates,
        "Repository": location.repository_url,
        "URL": location.url,
        "Sources": "available" if location.has_sources else "not available",
    }
    if location.has_sources:
        details["Sources URL"] = locator.locate_sources(request.product, request.version).url

    print(format_details(f"{request.product.code}-{request.version} ({variant.value})", details))
    return 0
