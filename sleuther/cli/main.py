"""Main CLI application using Cyclopts."""

import cyclopts

from sleuther.cli.commands.check import check
from sleuther.cli.commands.inspect import inspect
from sleuther.cli.commands.rate import rate
from sleuther.cli.commands.run import run

app = cyclopts.App(
    name="sleuther",
    help="Dataset-quality sleuther - link health and open-data star ratings",
)

app.command(run, name="run")
app.command(inspect, name="inspect")
app.command(check, name="check")
app.command(rate, name="rate")
