"""
Daily Recipes - CLI Entry Point.

Usage:
    daily-recipes generate          Generate today's recipe
    daily-recipes rate love         Rate the latest recipe (love/like/dislike/skip)
    daily-recipes shopping-list     Shopping list for the latest recipe
    daily-recipes preferences       Show learned preferences
    daily-recipes profile --diet x  Show or update the user profile
    daily-recipes health            Show configuration
"""

import asyncio
import logging
from datetime import datetime

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from daily_recipes.models import Interaction, Recipe

app = typer.Typer(
    name="daily-recipes",
    help="Daily Recipes - personalized AI recipe of the day.",
    add_completion=False,
)
console = Console()

RATINGS = ("love", "like", "dislike", "skip")


def _setup_logging() -> None:
    from daily_recipes.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _service():
    from daily_recipes.service import RecipeService

    service = RecipeService()
    service.load_profile()
    return service


def _print_recipe(recipe: Recipe) -> None:
    stars = round(recipe.confidence / 20)
    header = f"[bold green]{recipe.title}[/bold green]" + (" ✨" if recipe.is_creative else "")
    meta = (
        f"{recipe.cooking_time} min (total {recipe.total_time}) • {recipe.difficulty} • "
        f"cost {recipe.estimated_cost} • {'★' * stars}{'☆' * (5 - stars)}"
    )
    lines = [header, f"[dim]{meta}[/dim]"]
    if recipe.recommendation_reason:
        lines.append(f"\n💡 {recipe.recommendation_reason}")
    if recipe.description:
        lines.append(f"\n{recipe.description}")

    lines.append("\n[bold]Ingredients[/bold]")
    for ingredient in recipe.ingredients:
        lines.append(f"  • {ingredient.text}" + (" 🌱" if ingredient.seasonal else ""))

    lines.append("\n[bold]Instructions[/bold]")
    for i, step in enumerate(recipe.instructions, 1):
        suffix = f" [dim]({step.time} min)[/dim]" if step.time else ""
        lines.append(f"  {i}. {step.text}{suffix}")
        if step.tip:
            lines.append(f"     [dim]Tip: {step.tip}[/dim]")

    if recipe.tags:
        lines.append(f"\n[dim]Tags: {', '.join(recipe.tags)}[/dim]")

    console.print(Panel.fit("\n".join(lines), title="Recipe of the day", border_style="green"))


@app.command()
def generate(
    provider: str = typer.Option(None, "--provider", "-p", help="openai, anthropic, ollama or local"),
    fallback: bool = typer.Option(True, "--fallback/--no-fallback", help="Show fallback recipe on failure"),
    log_prompts: bool = typer.Option(False, "--log-prompts", "-l", help="Log prompts to prompt_logs/"),
) -> None:
    """Generate today's recipe."""
    from daily_recipes.config import settings
    from daily_recipes.context import MockWeatherSource
    from daily_recipes.errors import RecipeError
    from daily_recipes.llm.prompt_logger import enable_prompt_logging, get_session_log_dir

    _setup_logging()
    if log_prompts or settings.log_prompts:
        enable_prompt_logging(True)

    service = _service()
    now = datetime.now()
    weather = MockWeatherSource().current(settings.region, now)
    context = service.context_for(now, weather=weather, provider=provider)

    with Live(Spinner("dots", text="Generating recipe..."), console=console, transient=True):
        try:
            if fallback:
                recipe = asyncio.run(service.generate_or_fallback(context))
            else:
                recipe = asyncio.run(service.generate(context))
        except RecipeError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)

    service.record_interaction(Interaction.shown(recipe))
    _print_recipe(recipe)

    log_dir = get_session_log_dir()
    if log_dir:
        console.print(f"\n[dim]📝 Prompts logged to: {log_dir}[/dim]")


@app.command()
def rate(
    rating: str = typer.Argument(..., help="love, like, dislike or skip"),
) -> None:
    """Rate the most recently generated recipe."""
    _setup_logging()
    if rating not in RATINGS:
        console.print(f"[red]Unknown rating '{rating}'. Use one of: {', '.join(RATINGS)}[/red]")
        raise typer.Exit(code=2)

    service = _service()
    entry = service.cache.latest()
    if entry is None:
        console.print("[yellow]No recipe generated yet. Run 'daily-recipes generate' first.[/yellow]")
        raise typer.Exit(code=1)

    service.rate(entry.recipe, rating)
    console.print(f"✅ Rated [bold]{entry.recipe.title}[/bold]: {rating}")


@app.command("shopping-list")
def shopping_list() -> None:
    """Show the shopping list for the most recent recipe."""
    _setup_logging()
    service = _service()
    entry = service.cache.latest()
    if entry is None:
        console.print("[yellow]No recipe generated yet. Run 'daily-recipes generate' first.[/yellow]")
        raise typer.Exit(code=1)

    result = service.build_shopping_list(entry.recipe)
    console.print(f"\n[bold]Shopping list: {result.recipe_title}[/bold] [dim]({result.date})[/dim]")
    for category, items in result.grouped().items():
        console.print(f"\n[bold cyan]{category}[/bold cyan]")
        for item in items:
            console.print(f"  ☐ {item.text}" + (" 🌱" if item.seasonal else ""))
    console.print(f"\n[dim]Estimated cost: {result.estimated_cost}[/dim]")


@app.command()
def preferences() -> None:
    """Show learned preference weights."""
    _setup_logging()
    service = _service()
    weights = service.learned_preferences
    if not weights:
        console.print("[dim]Nothing learned yet. Rate some recipes first.[/dim]")
        return

    table = Table(title="Learned preferences")
    table.add_column("Feature")
    table.add_column("Weight", justify="right")
    for key, value in sorted(weights.items(), key=lambda item: (-item[1], item[0])):
        table.add_row(key, f"{value:g}")
    console.print(table)


@app.command()
def profile(
    diet: list[str] = typer.Option(None, "--diet", help="Dietary restriction (repeatable)"),
    cuisine: list[str] = typer.Option(None, "--cuisine", help="Preferred cuisine (repeatable)"),
    skill: str = typer.Option(None, "--skill", help="beginner, medium or advanced"),
    available_time: int = typer.Option(None, "--time", help="Available cooking time in minutes"),
    household: int = typer.Option(None, "--household", help="Household size"),
    clear_diet: bool = typer.Option(False, "--clear-diet", help="Remove all dietary restrictions"),
    clear_cuisine: bool = typer.Option(False, "--clear-cuisine", help="Remove all preferred cuisines"),
) -> None:
    """Show or update the user profile. --diet and --cuisine replace the whole list."""
    from pydantic import ValidationError
    from rich.markup import escape

    _setup_logging()
    service = _service()

    changes = {
        "cooking_skill_level": skill,
        "available_time": available_time,
        "household_size": household,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if diet:
        changes["dietary_restrictions"] = diet
    elif clear_diet:
        changes["dietary_restrictions"] = []
    if cuisine:
        changes["cuisine_preferences"] = cuisine
    elif clear_cuisine:
        changes["cuisine_preferences"] = []

    if changes:
        try:
            service.update_profile(**changes)
        except ValidationError as e:
            console.print(f"[red]Invalid profile: {escape(str(e))}[/red]")
            raise typer.Exit(code=2)

    console.print_json(data=service.user_profile.to_dict())


@app.command()
def health() -> None:
    """Check configuration."""
    from daily_recipes.config import get_settings

    console.print("\n[bold]Daily Recipes Health Check[/bold]\n")

    settings = get_settings()
    console.print("✅ Configuration loaded")
    console.print(f"   Provider: {settings.provider}")
    console.print(f"   Region / language: {settings.region} / {settings.language}")
    console.print(f"   Data directory: {settings.data_dir}")
    console.print(f"   Log level: {settings.log_level}")

    if settings.provider in ("openai", "anthropic"):
        if settings.api_key_for(settings.provider):
            console.print(f"✅ {settings.provider} API key configured")
        else:
            console.print(f"❌ {settings.provider} API key missing")
    else:
        base_url = getattr(settings, f"{settings.provider}_base_url", None)
        if base_url is None:
            console.print(f"❌ Unknown provider: {settings.provider}")
        else:
            console.print(f"✅ Local provider at {base_url}")


if __name__ == "__main__":
    app()
