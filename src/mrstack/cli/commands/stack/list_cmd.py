import click

from mrstack.cli.core import load_stack_or_exit
from mrstack.cli.output import machine_output, user_output
from mrstack.core.context import MrStackContext


@click.command("list")
@click.option("--stack", "stack_title", help="Stack to show (default: current stack).")
@click.pass_obj
def list_stack(ctx: MrStackContext, stack_title: str | None) -> None:
    """Show the branches of a stack from head to tail."""
    stack = load_stack_or_exit(ctx, stack_title, allow_empty=True)

    title = click.style(stack.title, fg="cyan", bold=True)
    base = stack.base_branch or ctx.config.base_branch or "remote default"
    user_output(f"{title} (base: {click.style(base, fg='yellow')})")

    if not stack.refs:
        user_output("No branches yet. Add one with 'mrstack stack save'.")
        return

    for index, ref in enumerate(stack.iter(), start=1):
        branch = click.style(ref.branch, fg="yellow")
        mr = click.style(ref.mr, fg="blue") if ref.mr else click.style("no MR", fg="bright_black")
        machine_output(f"{index:>3}. {branch} {click.style(ref.sha[:8], fg='bright_black')} {mr}")
