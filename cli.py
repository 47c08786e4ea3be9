import json
import os

import click
from cytoolz import valmap

from catalog import Catalog
from catalog import CatalogError
from conversion import ConversionEngine
from decisions import ConsoleDecider
from decisions import ScriptedDecider
from template import TemplateError
from template import load_template
from template import save_template
from template import summarize
from util import prefix


DEFAULT_REFERENCE_DIR = prefix(__file__)("reference")

REFERENCE_ENVVAR = "PI_REFERENCE_DIR"


def load_catalog(reference):
    try:
        return Catalog.load(reference)
    except CatalogError as err:
        raise click.ClickException(str(err))


def default_output(template_path, environment):
    (stem, ext) = os.path.splitext(template_path)
    slug = environment.name.lower().replace(" ", "_")
    return f"{stem}_{slug}{ext or '.json'}"


def names(catalog, material_ids):
    return ", ".join(catalog.material_name(m) for m in sorted(material_ids)) or "-"


reference_option = click.option(
    "-r",
    "--reference",
    type=click.Path(file_okay=False),
    default=DEFAULT_REFERENCE_DIR,
    envvar=REFERENCE_ENVVAR,
    show_default=True,
)


@click.group()
def cli():
    """Planetary industry template helpers."""


@cli.command()
@reference_option
def planets(reference):
    catalog = load_catalog(reference)
    for env in catalog.environments.values():
        click.echo(f"{env.name} [{env.environment_type}]")
        click.echo(f"    products:  {names(catalog, env.available_basic_products)}")
        click.echo(f"    resources: {names(catalog, env.available_raw_resources)}")


@cli.command()
@reference_option
@click.argument("template", type=click.Path(exists=True, dir_okay=False))
def show(reference, template):
    catalog = load_catalog(reference)
    try:
        configuration = load_template(template)
    except TemplateError as err:
        raise click.ClickException(str(err))
    summary = summarize(configuration, catalog)
    click.echo(json.dumps(summary, indent=2))


@cli.command()
@reference_option
@click.option("-p", "--planet")
@click.option("-a", "--answers", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False))
@click.option("-q", "--quiet", is_flag=True)
@click.argument("template", type=click.Path(exists=True, dir_okay=False))
def convert(reference, planet, answers, output, quiet, template):
    catalog = load_catalog(reference)
    try:
        configuration = load_template(template)
    except TemplateError as err:
        raise click.ClickException(str(err))

    try:
        decider = ScriptedDecider.load(answers) if answers else ConsoleDecider()
    except ValueError as err:
        raise click.BadParameter(str(err), param_hint="--answers")
    engine = ConversionEngine(catalog, decider)

    if planet is not None:
        try:
            target = catalog.find_environment(planet).environment_type
        except LookupError as err:
            raise click.BadParameter(str(err), param_hint="--planet")
    else:
        target = engine.choose_environment(exclude=configuration.environment_type)
        if target is None:
            click.echo("No planet selected; nothing written.")
            return

    environment = catalog.environment(target)
    report = engine.convert(configuration, target)

    if not quiet:
        for (kind, message) in report.notes:
            click.echo(f"[{kind}] {message}")
        click.echo(f"Facilities retargeted: {len(report.facility_changes)}")
    else:
        for (kind, message) in report.problems():
            click.echo(f"[{kind}] {message}", err=True)

    click.echo(f"Raw resources on {environment.name}: {names(catalog, report.raw_resources)}")

    summary = valmap(len, summarize(configuration, catalog)["products"])
    if not quiet:
        click.echo(f"Products by tier: {summary}")

    output = output or default_output(template, environment)
    save_template(configuration, output)
    click.echo(f"Wrote {output}")


if __name__ == "__main__":
    cli()
