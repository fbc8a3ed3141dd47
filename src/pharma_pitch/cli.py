"""CLI interface for pharma-pitch."""

import asyncio
import functools
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .catalog.dashboard import summarize
from .catalog.models import Brand, Doctor, Slide, new_doctor
from .catalog.store import ContentStore
from .config.logging import setup_logging
from .config.settings import Settings, get_settings
from .exceptions import (
    BrandNotFoundError,
    DoctorNotFoundError,
    PharmaPitchError,
    SlideNotFoundError,
    ValidationError,
)
from .ingest.conversion import convert_upload
from .ingest.upload import UploadedFile, add_slides_from_upload, create_brand_from_upload
from .playlist.resolver import resolve_saved_playlist
from .playlist.selection import SlideSelection
from .presentation.controls import Command, command_for_key
from .presentation.display import ExclusiveDisplay, TerminalScreenHost
from .presentation.session import (
    EMPTY_MESSAGE,
    PresentationSession,
    open_selector_for_brand,
    open_selector_for_doctor,
    start_brand_preview,
    start_catalog_presentation,
    start_custom_presentation,
    start_pitch_for_doctor,
)
from .recovery import RecoveryChoice, clear_persisted_state, run_with_recovery
from .storage.persistence import create_persistence
from .workspace import Workspace

app = typer.Typer(
    name="pharma-pitch",
    help="Manage brand slide decks and doctors, and present pitches.",
    rich_markup_mode="rich",
)

console = Console()

T = TypeVar("T")

PLAYER_HINT = "[dim]Enter/n next, p previous, b brands, f fullscreen, q close[/dim]"


def _load_settings() -> Settings:
    try:
        return get_settings()
    except PydanticValidationError as e:
        console.print(
            "[red]Configuration error:[/red] Invalid configuration values.\n"
            "Check your environment or .env file.\n"
            f"Details: {e}"
        )
        raise typer.Exit(1)


def _ask_recovery(exc: BaseException) -> RecoveryChoice:
    console.print(
        Panel(
            f"[bold red]Something went wrong:[/bold red] {exc}\n\n"
            "[bold]reload[/bold]  try again with the saved data\n"
            "[bold]reset[/bold]   clear all saved data, then try again\n"
            "[bold]quit[/bold]    give up",
            title="Unexpected Error",
            border_style="red",
        )
    )
    choice = Prompt.ask(
        "Recover", choices=[c.value for c in RecoveryChoice], default="reload", console=console
    )
    return RecoveryChoice(choice)


def _run(action: Callable[[Workspace], Awaitable[T]]) -> T:
    """Run an action against the persisted workspace, reporting domain errors."""
    settings = _load_settings()
    try:
        return asyncio.run(run_with_recovery(action, _ask_recovery, settings))
    except PharmaPitchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _find_brand(store: ContentStore, ref: str) -> Brand:
    """Look a brand up by id, then by case-insensitive name."""
    brand = store.get_brand(ref)
    if brand is not None:
        return brand
    matches = [b for b in store.brands if b.name.lower() == ref.lower()]
    if len(matches) > 1:
        raise ValidationError(f"Brand name '{ref}' is ambiguous", details="Use the brand id")
    if not matches:
        raise BrandNotFoundError(f"Brand '{ref}' not found")
    return matches[0]


def _find_doctor(store: ContentStore, ref: str) -> Doctor:
    """Look a doctor up by id, then by case-insensitive name."""
    doctor = store.get_doctor(ref)
    if doctor is not None:
        return doctor
    matches = [d for d in store.doctors if d.name.lower() == ref.lower()]
    if len(matches) > 1:
        raise ValidationError(f"Doctor name '{ref}' is ambiguous", details="Use the doctor id")
    if not matches:
        raise DoctorNotFoundError(f"Doctor '{ref}' not found")
    return matches[0]


def _require_slide(brand: Brand, slide_id: str) -> None:
    if brand.find_slide(slide_id) is None:
        raise SlideNotFoundError(f"Slide '{slide_id}' not found in {brand.name}")


def _converter(settings: Settings):
    return functools.partial(
        convert_upload, scale=settings.pdf_render_scale, quality=settings.pdf_jpeg_quality
    )


def _describe_content(slide: Slide) -> str:
    if slide.url.startswith("data:"):
        return f"embedded {slide.type.value} ({len(slide.url) // 1024} KB)"
    return slide.url


def _print_slides(brand: Brand) -> None:
    table = Table(title=f"{brand.name} Slides", show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Content", style="dim")
    for s in brand.slides:
        table.add_row(str(s.order + 1), s.id, s.name or "-", _describe_content(s))
    console.print(table)


# ---------------------------------------------------------------------------
# Dashboard and catalog
# ---------------------------------------------------------------------------


@app.command()
def status() -> None:
    """Show the dashboard: totals, recent doctors and featured brands."""

    async def action(ws: Workspace) -> None:
        summary = summarize(ws.store)
        console.print(
            Panel(
                f"[bold]Doctors:[/bold] {summary.doctor_count}\n"
                f"[bold]Brands:[/bold] {summary.brand_count}",
                title="Pharma Pitch",
                border_style="blue",
            )
        )
        if summary.recent_doctors:
            console.print("\n[bold]Recent Doctors:[/bold]")
            for d in summary.recent_doctors:
                console.print(f"  [cyan]{d.name}[/cyan] {d.specialty} ({d.hospital})")
        if summary.featured_brands:
            console.print("\n[bold]Featured Brands:[/bold]")
            for f in summary.featured_brands:
                console.print(f"  [magenta]{f.brand.name}[/magenta] {f.slide_count} slides")

    _run(action)


@app.command()
def brands() -> None:
    """List every brand in the catalog."""

    async def action(ws: Workspace) -> None:
        if not ws.store.brands:
            console.print(
                "[yellow]No brands yet.[/yellow] Add one with [bold]pharma-pitch upload[/bold]."
            )
            return
        table = Table(title="Brands", show_header=True, header_style="bold")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="magenta")
        table.add_column("Slides", justify="right")
        table.add_column("Description")
        for b in ws.store.brands:
            table.add_row(b.id, b.name, str(b.slide_count), b.description)
        console.print(table)

    _run(action)


@app.command()
def slides(brand: str = typer.Argument(..., help="Brand id or name")) -> None:
    """List a brand's slides in order."""

    async def action(ws: Workspace) -> None:
        _print_slides(_find_brand(ws.store, brand))

    _run(action)


@app.command()
def upload(
    path: Path = typer.Argument(
        ..., help="Image or PDF to create a brand from", exists=True, dir_okay=False
    ),
) -> None:
    """Create a new brand from an uploaded image or PDF."""
    settings = _load_settings()

    async def action(ws: Workspace) -> Brand:
        file = UploadedFile.from_path(path)
        with console.status("Analyzing content..."):
            brand = await create_brand_from_upload(file, converter=_converter(settings))
        return ws.store.save_brand(brand)

    brand = _run(action)
    console.print(
        f"[green]Created brand[/green] [bold]{brand.name}[/bold] "
        f"with {brand.slide_count} slides ({brand.id})"
    )


@app.command("add-slides")
def add_slides(
    brand: str = typer.Argument(..., help="Brand id or name"),
    path: Path = typer.Argument(..., help="Image or PDF to append", exists=True, dir_okay=False),
) -> None:
    """Append slides from an image or PDF to an existing brand."""
    settings = _load_settings()

    async def action(ws: Workspace) -> Brand:
        target = _find_brand(ws.store, brand)
        file = UploadedFile.from_path(path)
        updated = await add_slides_from_upload(target, file, converter=_converter(settings))
        return ws.store.save_brand(updated)

    updated = _run(action)
    console.print(f"[green]{updated.name} now has {updated.slide_count} slides.[/green]")


@app.command("remove-slide")
def remove_slide(
    brand: str = typer.Argument(..., help="Brand id or name"),
    slide_id: str = typer.Argument(..., help="Slide id"),
) -> None:
    """Remove one slide from a brand."""

    async def action(ws: Workspace) -> None:
        target = _find_brand(ws.store, brand)
        _require_slide(target, slide_id)
        _print_slides(ws.store.remove_slide(target.id, slide_id))

    _run(action)


@app.command("move-slide")
def move_slide(
    brand: str = typer.Argument(..., help="Brand id or name"),
    slide_id: str = typer.Argument(..., help="Slide id"),
    left: bool = typer.Option(False, "--left", help="Move one position earlier"),
    right: bool = typer.Option(False, "--right", help="Move one position later"),
) -> None:
    """Move a slide one position left or right."""
    if left == right:
        console.print("[red]Pass exactly one of --left or --right.[/red]")
        raise typer.Exit(1)

    async def action(ws: Workspace) -> None:
        target = _find_brand(ws.store, brand)
        _require_slide(target, slide_id)
        _print_slides(ws.store.move_slide(target.id, slide_id, "left" if left else "right"))

    _run(action)


@app.command("reorder-slide")
def reorder_slide(
    brand: str = typer.Argument(..., help="Brand id or name"),
    slide_id: str = typer.Argument(..., help="Slide to move"),
    target_id: str = typer.Argument(..., help="Slide whose position it takes"),
) -> None:
    """Move a slide to another slide's position, shifting the rest."""

    async def action(ws: Workspace) -> None:
        target = _find_brand(ws.store, brand)
        _require_slide(target, slide_id)
        _require_slide(target, target_id)
        _print_slides(ws.store.reorder_slide(target.id, slide_id, target_id))

    _run(action)


@app.command("rename-slide")
def rename_slide(
    brand: str = typer.Argument(..., help="Brand id or name"),
    slide_id: str = typer.Argument(..., help="Slide id"),
    name: str = typer.Argument(..., help="New slide name"),
) -> None:
    """Rename a slide."""

    async def action(ws: Workspace) -> None:
        target = _find_brand(ws.store, brand)
        _require_slide(target, slide_id)
        _print_slides(ws.store.rename_slide(target.id, slide_id, name))

    _run(action)


@app.command("delete-brand")
def delete_brand(
    brand: str = typer.Argument(..., help="Brand id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a brand and all of its slides."""

    async def action(ws: Workspace) -> Optional[Brand]:
        target = _find_brand(ws.store, brand)
        prompt = f"Delete brand [bold]{target.name}[/bold]?"
        if not yes and not Confirm.ask(prompt, console=console):
            return None
        ws.store.delete_brand(target.id)
        return target

    deleted = _run(action)
    if deleted is not None:
        console.print(f"[green]Deleted brand[/green] {deleted.name}")


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------


@app.command()
def doctors(
    search: Optional[str] = typer.Option(
        None, "--search", "-s", help="Filter by name or specialty"
    ),
) -> None:
    """List doctors, optionally filtered."""

    async def action(ws: Workspace) -> None:
        found = ws.store.search_doctors(search) if search else list(ws.store.doctors)
        if not found:
            console.print("[yellow]No doctors found.[/yellow]")
            return
        table = Table(title="Doctors", show_header=True, header_style="bold")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Specialty")
        table.add_column("Hospital")
        table.add_column("Brands")
        table.add_column("Saved Pitch", justify="right")
        for d in found:
            names = ", ".join(b.name for b in ws.store.brands_for_doctor(d)) or "-"
            saved = str(len(d.saved_slide_ids)) if d.has_saved_playlist else "-"
            table.add_row(d.id, d.name, d.specialty, d.hospital, names, saved)
        console.print(table)

    _run(action)


@app.command("add-doctor")
def add_doctor(
    name: str = typer.Argument(..., help="Doctor's full name"),
    specialty: str = typer.Option(..., "--specialty", help="Medical specialty"),
    hospital: Optional[str] = typer.Option(None, "--hospital", help="Hospital or clinic"),
    brand: Optional[List[str]] = typer.Option(
        None, "--brand", "-b", help="Assigned brand (repeatable)"
    ),
) -> None:
    """Add a doctor to the directory."""

    async def action(ws: Workspace) -> Doctor:
        brand_ids = [_find_brand(ws.store, ref).id for ref in brand or []]
        return ws.store.save_doctor(new_doctor(name, specialty, hospital, brand_ids))

    doctor = _run(action)
    console.print(f"[green]Added[/green] {doctor.name} ({doctor.id})")


@app.command("edit-doctor")
def edit_doctor(
    doctor: str = typer.Argument(..., help="Doctor id or name"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    specialty: Optional[str] = typer.Option(None, "--specialty", help="New specialty"),
    hospital: Optional[str] = typer.Option(None, "--hospital", help="New hospital"),
    brand: Optional[List[str]] = typer.Option(
        None, "--brand", "-b", help="Replace assigned brands (repeatable)"
    ),
    toggle_brand: Optional[List[str]] = typer.Option(
        None, "--toggle-brand", "-t", help="Assign or unassign one brand (repeatable)"
    ),
) -> None:
    """Edit a doctor. The saved pitch is kept."""

    async def action(ws: Workspace) -> Doctor:
        existing = _find_doctor(ws.store, doctor)
        if brand:
            brand_ids = [_find_brand(ws.store, ref).id for ref in brand]
        else:
            brand_ids = list(existing.assigned_brand_ids)
        updated = new_doctor(
            name if name is not None else existing.name,
            specialty if specialty is not None else existing.specialty,
            hospital if hospital is not None else existing.hospital,
            brand_ids,
            saved_slide_ids=existing.saved_slide_ids,
            doctor_id=existing.id,
        )
        for ref in toggle_brand or []:
            updated = updated.with_brand_toggled(_find_brand(ws.store, ref).id)
        return ws.store.save_doctor(updated)

    updated = _run(action)
    console.print(f"[green]Updated[/green] {updated.name}")


@app.command("delete-doctor")
def delete_doctor(
    doctor: str = typer.Argument(..., help="Doctor id or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove a doctor from the directory."""

    async def action(ws: Workspace) -> Optional[Doctor]:
        target = _find_doctor(ws.store, doctor)
        if not yes and not Confirm.ask(f"Delete [bold]{target.name}[/bold]?", console=console):
            return None
        ws.store.delete_doctor(target.id)
        return target

    deleted = _run(action)
    if deleted is not None:
        console.print(f"[green]Deleted[/green] {deleted.name}")


@app.command()
def playlist(doctor: str = typer.Argument(..., help="Doctor id or name")) -> None:
    """Show a doctor's saved pitch as it resolves against the current catalog."""

    async def action(ws: Workspace) -> None:
        target = _find_doctor(ws.store, doctor)
        items = resolve_saved_playlist(target.saved_slide_ids, ws.store.brands)
        if not items:
            console.print(f"[yellow]{target.name} has no saved pitch.[/yellow]")
            return
        table = Table(title=f"Saved Pitch for {target.name}", show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Brand", style="magenta")
        table.add_column("Slide", style="cyan")
        for i, item in enumerate(items, start=1):
            table.add_row(str(i), item.brand.name, item.slide.name or item.slide.id)
        console.print(table)

    _run(action)


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")) -> None:
    """Delete all saved brands and doctors."""
    settings = _load_settings()
    if not yes and not Confirm.ask("Delete [bold]all[/bold] saved data?", console=console):
        raise typer.Exit(0)
    asyncio.run(clear_persisted_state(create_persistence(settings)))
    console.print("[green]Saved data cleared.[/green]")


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------


def _render(session: PresentationSession) -> None:
    pos = session.position
    header = f"[bold]{session.mode_label}[/bold]"
    if not session.is_custom:
        header += f": {session.brand_name}"
    if session.pitching_to:
        header += f"\n[dim]Pitching to:[/dim] {session.pitching_to}"
    if pos.slide is None:
        body = f"[yellow]{EMPTY_MESSAGE}[/yellow]"
    else:
        lines = [f"[bold cyan]{pos.slide.name or 'Untitled slide'}[/bold cyan]"]
        if session.is_custom:
            lines.append(f"[magenta]{session.brand_name}[/magenta]")
        lines.append(f"[dim]{_describe_content(pos.slide)}[/dim]")
        body = "\n".join(lines)
    console.print(
        Panel(
            f"{header}\n\n{body}",
            subtitle=session.counter,
            border_style="green" if pos.has_slide else "yellow",
        )
    )


async def _choose_brand(session: PresentationSession) -> None:
    menu = session.brand_menu()
    if not menu:
        return
    for entry in menu:
        marker = "*" if entry.active else " "
        console.print(f" {marker} {entry.index + 1}. {entry.name} ({entry.slide_count})")
    answer = await asyncio.to_thread(console.input, "Brand number: ")
    if answer.strip().isdigit():
        session.jump_to_brand(int(answer.strip()) - 1)


async def _play(session: PresentationSession, fullscreen: bool) -> None:
    """Drive a session from keyboard input until it is closed."""
    session.open(fullscreen=fullscreen)
    try:
        while not session.closed:
            _render(session)
            console.print(PLAYER_HINT)
            try:
                key = await asyncio.to_thread(console.input, "> ")
            except EOFError:
                break
            command = Command.NEXT if key == "" else command_for_key(key)
            if command is Command.BRANDS:
                await _choose_brand(session)
            elif command is not None:
                session.handle(command)
    finally:
        session.close()


@app.command()
def present(
    doctor: Optional[str] = typer.Option(None, "--doctor", "-d", help="Pitch to this doctor"),
    brand: Optional[str] = typer.Option(None, "--brand", "-b", help="Preview one brand"),
    slide: Optional[List[str]] = typer.Option(
        None, "--slide", "-s", help="Play a custom selection of slide ids (repeatable)"
    ),
    save_default: bool = typer.Option(
        False, "--save-default", help="Save the custom selection as the doctor's default pitch"
    ),
    fullscreen: bool = typer.Option(False, "--fullscreen", "-f", help="Start in fullscreen"),
) -> None:
    """Present slides.

    Examples:
        pharma-pitch present --doctor "Dr. Jane Smith"
        pharma-pitch present --brand Cardiovex
        pharma-pitch present --doctor "Dr. Jane Smith" -s <id> -s <id> --save-default
    """

    async def action(ws: Workspace) -> None:
        display = ExclusiveDisplay(TerminalScreenHost(console))
        target_doctor = _find_doctor(ws.store, doctor) if doctor else None
        target_brand = _find_brand(ws.store, brand) if brand else None

        if slide:
            if target_doctor is not None:
                selection = open_selector_for_doctor(ws.store, target_doctor)
            elif target_brand is not None:
                selection = open_selector_for_brand(ws.store, target_brand)
            else:
                selection = SlideSelection(brands=ws.store.brands)
            selection.selected_ids = set(slide)
            selection.set_save_as_default(save_default)
            if not selection.can_confirm:
                raise ValidationError("Select at least one slide")
            if save_default and not selection.can_save:
                console.print("[yellow]--save-default needs --doctor; not saving.[/yellow]")
            console.print(f"[dim]{selection.title}[/dim]")
            session = start_custom_presentation(ws.store, selection.confirm(), display)
        elif target_doctor is not None:
            session = start_pitch_for_doctor(ws.store, target_doctor, display)
        elif target_brand is not None:
            session = start_brand_preview(ws.store, target_brand, display)
        else:
            session = start_catalog_presentation(ws.store, display)
        await _play(session, fullscreen)

    _run(action)


@app.callback()
def _configure() -> None:
    """Manage brand slide decks and doctors, and present pitches."""
    setup_logging(level=_load_settings().log_level)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
