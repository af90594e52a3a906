"""builder.py — Render form state into tideorm command strings.

The strings are handed to the backend verbatim and must match the CLI's
grammar: a verb followed by `--flag value`, `--flag "value"`, `--flag=value`
or bare `--flag` tokens.
"""

import re
from dataclasses import dataclass

from .errors import MissingRequiredField

TOOL = "tideorm"

_NEEDS_QUOTES = re.compile(r"[\s,\"']")


@dataclass
class ModelFormState:
    """Values of the model generator form."""

    name: str = ""
    table: str = ""
    fields: str = ""
    relations: str = ""
    indexed: str = ""
    timestamps: bool = True
    soft_deletes: bool = False
    migration: bool = False
    factory: bool = False
    seeder: bool = False


@dataclass(frozen=True)
class CommandSpec:
    """A verb plus an ordered tuple of (flag, value) pairs.

    value None renders a bare flag; a value starting with "=" is glued to
    the flag (`--timestamps=false`).
    """

    base: str
    flags: tuple = ()

    def render(self):
        parts = [self.base]
        for name, value in self.flags:
            if value is None:
                parts.append(f"--{name}")
            elif value.startswith("="):
                parts.append(f"--{name}{value}")
            else:
                parts.append(f"--{name} {value}")
        return " ".join(parts)


def quote(value, force=False):
    """Wrap a flag value in double quotes when it is not a single plain token."""
    if force or _NEEDS_QUOTES.search(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def model_spec(form):
    name = form.name.strip()
    base = f"make model {name}" if name else "make model"
    flags = []

    table = form.table.strip()
    if table:
        flags.append(("table", quote(table)))
    # List-valued flags are always quoted.
    for flag, value in (
        ("fields", form.fields),
        ("relations", form.relations),
        ("indexed", form.indexed),
    ):
        value = value.strip()
        if value:
            flags.append((flag, quote(value, force=True)))

    if not form.timestamps:
        flags.append(("timestamps", "=false"))
    if form.soft_deletes:
        flags.append(("soft-deletes", None))
    if form.migration:
        flags.append(("migration", None))
    if form.factory:
        flags.append(("factory", None))
    if form.seeder:
        flags.append(("seeder", None))

    return CommandSpec(base, tuple(flags))


def build(form):
    """Render the `make model` command for the given form state."""
    return model_spec(form).render()


def require_model_name(form):
    if not form.name.strip():
        raise MissingRequiredField(
            "model-name", "Model Name Required", "Please enter a model name first."
        )


def preview(form):
    """Return the framed preview text. Nothing is executed."""
    require_model_name(form)
    return (
        f"Preview command:\n\n{TOOL} {build(form)}\n\n"
        '(Run "Generate Model" to execute)'
    )


# ── Other generators ───────────────────────────────────────────


def _require_name(name, kind):
    name = (name or "").strip()
    if not name:
        raise MissingRequiredField(
            f"{kind}-name", "Name Required", f"Please enter a {kind} name."
        )
    return name


def migration_command(name):
    return f"make migration {_require_name(name, 'migration')}"


def seeder_command(name):
    return f"make seeder {_require_name(name, 'seeder')}"


def factory_command(name):
    return f"make factory {_require_name(name, 'factory')}"


def seed_class_command(name):
    return f"db seed --class {_require_name(name, 'seeder')}"
