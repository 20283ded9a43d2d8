"""
Campus Match - CLI Entry Point.

Usage:
    campus-match health             Check configuration
    campus-match options            Show onboarding reference data
    campus-match nearest LAT LNG    Find the campus building closest to a point
    campus-match serve              Start the web API
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="campus-match",
    help="Campus Match - onboarding service tools.",
    add_completion=False,
)
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    """Configure logging for every command."""
    from campus_match.config import settings

    try:
        level = "DEBUG" if verbose else settings.log_level
    except Exception:
        level = "DEBUG" if verbose else "INFO"
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from campus_match.config import get_settings

    console.print("\n[bold]Campus Match Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.app_env}")
        console.print(f"   Log level: {settings.log_level}")

        if settings.supabase_url.startswith("https://"):
            console.print("✅ Supabase URL configured")
        else:
            console.print("❌ Supabase URL missing or invalid")

        if settings.cloudinary_cloud_name and settings.cloudinary_upload_preset:
            console.print("✅ Cloudinary upload configured")
        else:
            console.print("⚠️  Cloudinary not configured - photo uploads will be skipped")

        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def options() -> None:
    """List interests, clubs and campus buildings from the store."""
    from campus_match.db.client import get_client
    from onboarding.options import load_reference_data

    reference = asyncio.run(load_reference_data(get_client()))
    if reference.notice:
        console.print(f"[red]{reference.notice}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Interests[/bold] ({len(reference.interests)}): {', '.join(reference.interests)}")
    console.print(f"[bold]Clubs[/bold] ({len(reference.clubs)}): {', '.join(reference.clubs)}\n")

    table = Table(title="Campus Buildings")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Latitude", justify="right")
    table.add_column("Longitude", justify="right")
    for building in reference.buildings:
        table.add_row(str(building.id), building.name, f"{building.latitude:.5f}", f"{building.longitude:.5f}")
    console.print(table)


@app.command()
def nearest(
    latitude: float = typer.Argument(..., help="Latitude in decimal degrees"),
    longitude: float = typer.Argument(..., help="Longitude in decimal degrees"),
) -> None:
    """Find the campus building closest to a position."""
    from campus_match.db.client import get_client
    from onboarding.errors import NoCandidatesError
    from onboarding.geo import distance_meters
    from onboarding.location import find_nearest_building
    from onboarding.options import load_reference_data
    from onboarding.state import Coordinate

    reference = asyncio.run(load_reference_data(get_client()))
    point = Coordinate(latitude, longitude)

    try:
        building = find_nearest_building(point, reference.buildings)
    except NoCandidatesError as e:
        console.print(f"[red]{reference.notice or e.user_message}[/red]")
        raise typer.Exit(1)

    distance = distance_meters(point, building.coordinate)
    console.print(f"[bold green]{building.name}[/bold green] ({distance:,.0f} m away)")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web API server."""
    import os

    import uvicorn

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Campus Match API[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "campus_match.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from campus_match import __version__

    console.print(f"Campus Match version {__version__}")


if __name__ == "__main__":
    app()
