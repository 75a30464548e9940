"""Command-line interface for repo2ctx."""
import functools
import logging
import os
import sys
from typing import List, Optional

import click
from openai import APIError

from .adapters import LocalAdapter, create_adapter, parse_repo_url
from .config import RepoConfig, config_path, load_config, save_config, ProjectConfig
from .core.allocator import BudgetPolicy
from .core.builder import ContextBuilder, GroupSpec, write_document
from .core.discovery import FilterOptions
from .core.models import BuildResult, Config, GroupResult
from .core.serializer import OutputFormat
from .core.tokenizer import TokenCounter
from .exceptions import ConfigError, SourceError
from .utils.console import ConsoleManager, THEMES, get_console

DUMP_BUDGET = 50_000


def setup_logging(debug: bool) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Reduce noise from external libraries
    for name in ("urllib3", "httpx", "httpcore", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _split_list(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [p.strip() for p in value.split(',') if p.strip()]


def handle_errors(func):
    """Turn expected failures into a console error and exit status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        console: ConsoleManager = ctx.obj['console']
        try:
            return func(*args, **kwargs)
        except (ConfigError, SourceError, ValueError, OSError) as e:
            console.print_error(str(e))
            if ctx.obj.get('debug'):
                console.print_exception()
            ctx.exit(1)
        except APIError as e:
            console.print_error(f"API error: {e}")
            if ctx.obj.get('debug'):
                console.print_exception()
            ctx.exit(1)
        except KeyboardInterrupt:
            console.print_error("Interrupted by user")
            ctx.exit(1)
    return wrapper


def _report_group(console: ConsoleManager, section: GroupResult) -> None:
    selected, discovered, tokens = section.stats()
    console.print_success(
        f"{section.group.full_name}: {selected}/{discovered} files (~{tokens:,} tokens)"
    )


def specs_from_project(project: ProjectConfig, config: Config,
                       include_tests: bool) -> List[GroupSpec]:
    """
    Resolve every configured repository into a group spec.

    Path restrictions are validated for all repositories before anything
    is fetched.
    """
    options = []
    for repo in project.repos:
        opts = FilterOptions(paths=repo.paths, include=repo.include,
                             exclude=repo.exclude, include_tests=include_tests)
        opts.restricted_paths()
        options.append(opts)

    specs = []
    for repo, opts in zip(project.repos, options):
        adapter = create_adapter(repo.url, config, ref=repo.ref)
        specs.append(GroupSpec(info=adapter.group_info(), root=adapter.resolve(), options=opts))
    return specs


def local_spec(path: str, config: Config, paths: Optional[List[str]] = None,
               include_tests: bool = True) -> GroupSpec:
    adapter = LocalAdapter(path, config)
    options = FilterOptions(paths=paths, include_tests=include_tests)
    return GroupSpec(info=adapter.group_info(), root=adapter.resolve(), options=options)


def _print_summary(console: ConsoleManager, result: BuildResult, output: str,
                   exact: Optional[int] = None, breakdown: bool = False) -> None:
    lines = [
        f"Generated {output}",
        f"{result.total_files} files, ~{result.total_tokens:,} of {result.budget:,} tokens",
    ]
    if exact is not None:
        lines.append(f"Exact (tiktoken): {exact:,} tokens")
    if breakdown and result.total_files:
        lines.append("")
        lines.append(" | ".join(f"{cat}: {n}" for cat, n in result.category_breakdown().items()))
    console.print_panel("\n".join(lines), title="repo2ctx")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging and tracebacks')
@click.option('--theme', '-t', type=click.Choice(sorted(THEMES)), default='manhattan',
              help='Terminal color theme')
@click.version_option(package_name='repo2ctx')
@click.pass_context
def cli(ctx: click.Context, debug: bool, theme: str) -> None:
    """
    Build budgeted LLM context documents from source repositories.

    Files are ranked (types, entry points, tests, docs, source, config) and
    packed greedily until the token budget is spent.
    """
    setup_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj.setdefault("console", get_console(theme))
    ctx.obj.setdefault('config', Config())
    ctx.obj['debug'] = debug


@cli.command()
@click.pass_context
@handle_errors
def init(ctx: click.Context) -> None:
    """Create a .repo2ctx.json config file."""
    console: ConsoleManager = ctx.obj['console']
    if os.path.exists(config_path()):
        console.print_warning("Config file .repo2ctx.json already exists")
        return
    save_config(ProjectConfig())
    console.print_success("Created .repo2ctx.json")
    console.print_panel(
        "Next steps:\n"
        "  repo2ctx add <owner/repo>   Add a repository\n"
        "  repo2ctx build              Generate context file"
    )


@cli.command()
@click.argument('repo')
@click.option('--paths', '-p', help='Comma-separated paths to include (e.g. src,lib)')
@click.option('--ref', '-r', help='Git ref (branch, tag, commit)')
@click.option('--include', '-i', help='Comma-separated glob patterns to include')
@click.option('--exclude', '-e', help='Comma-separated glob patterns to exclude')
@click.pass_context
@handle_errors
def add(ctx: click.Context, repo: str, paths: Optional[str], ref: Optional[str],
        include: Optional[str], exclude: Optional[str]) -> None:
    """Add a repository to the config."""
    console: ConsoleManager = ctx.obj['console']
    project = load_config()
    parsed = parse_repo_url(repo)

    if any(r.url == parsed.url for r in project.repos):
        console.print_warning(f"{parsed.owner}/{parsed.name} is already in your config")
        console.print_info("Edit .repo2ctx.json directly to modify it")
        return

    entry = RepoConfig(url=parsed.url, ref=ref, paths=_split_list(paths),
                       include=_split_list(include), exclude=_split_list(exclude))
    FilterOptions(paths=entry.paths).restricted_paths()

    project.repos.append(entry)
    save_config(project)

    console.print_success(f"Added {parsed.owner}/{parsed.name}")
    if entry.paths:
        console.print_info(f"Paths: {', '.join(entry.paths)}")
    console.print_info("Run `repo2ctx build` to generate context")


@cli.command(name='list')
@click.pass_context
@handle_errors
def list_repos(ctx: click.Context) -> None:
    """List configured repositories."""
    console: ConsoleManager = ctx.obj['console']
    project = load_config()

    if not project.repos:
        console.print_info("No repos configured.")
        console.print_info("Run `repo2ctx add <owner/repo>` to add one.")
        return

    console.print_info(f"Configured repositories ({len(project.repos)}):")
    for repo in project.repos:
        parsed = parse_repo_url(repo.url)
        console.print(f"  • [path]{parsed.owner}/{parsed.name}[/path]")
        if repo.ref:
            console.print(f"      ref: {repo.ref}")
        if repo.paths:
            console.print(f"      paths: {', '.join(repo.paths)}")
        if repo.include:
            console.print(f"      include: {', '.join(repo.include)}")
        if repo.exclude:
            console.print(f"      exclude: {', '.join(repo.exclude)}")

    out = project.output
    console.print()
    console.print_info(
        f"Output: {out.format} | Budget: {out.max_tokens:,} tokens | "
        f"Tests: {'yes' if out.include_tests else 'no'} | Policy: {out.budget_policy}"
    )


cli.add_command(list_repos, name='ls')


@cli.command()
@click.option('--output', '-o', help='Output filename')
@click.option('--budget', '-b', type=click.IntRange(min=0), help='Token budget (default: from config)')
@click.option('--format', '-f', 'fmt', type=click.Choice([f.value for f in OutputFormat]),
              help='Output format')
@click.option('--tests/--no-tests', default=None, help='Include or exclude test files')
@click.option('--policy', type=click.Choice([p.value for p in BudgetPolicy]),
              help='How the budget is split between repositories')
@click.option('--exact-tokens', is_flag=True, help='Also report a tiktoken count of the output')
@click.pass_context
@handle_errors
def build(ctx: click.Context, output: Optional[str], budget: Optional[int], fmt: Optional[str],
          tests: Optional[bool], policy: Optional[str], exact_tokens: bool) -> None:
    """Build combined context from all configured repos."""
    console: ConsoleManager = ctx.obj['console']
    config: Config = ctx.obj['config']
    project = load_config()

    if not project.repos:
        console.print_error("No repositories configured. Run `repo2ctx add <owner/repo>` first.")
        ctx.exit(1)

    budget = project.output.max_tokens if budget is None else budget
    fmt = OutputFormat(fmt or project.output.format)
    include_tests = project.output.include_tests if tests is None else tests
    policy = BudgetPolicy(policy or project.output.budget_policy)
    output = output or f"context.{fmt.extension}"

    console.print_running(f"Building context (budget: {budget:,} tokens)")
    specs = specs_from_project(project, config, include_tests)

    builder = ContextBuilder(config)
    result = builder.build(specs, budget, fmt, policy,
                           on_group=lambda s: _report_group(console, s))
    write_document(result.document, output)

    exact = TokenCounter(config.token_encoder).count(result.document) if exact_tokens else None
    _print_summary(console, result, output, exact)


@cli.command()
@click.argument('repo')
@click.option('--output', '-o', help='Output filename')
@click.option('--budget', '-b', type=click.IntRange(min=0), default=DUMP_BUDGET, show_default=True,
              help='Token budget')
@click.option('--format', '-f', 'fmt', type=click.Choice([f.value for f in OutputFormat]),
              default=OutputFormat.MARKDOWN.value, help='Output format')
@click.option('--paths', '-p', help='Comma-separated paths to include')
@click.option('--tests/--no-tests', default=True, help='Include or exclude test files')
@click.option('--local', '-l', is_flag=True, help='Treat input as a local path instead of a GitHub repo')
@click.option('--exact-tokens', is_flag=True, help='Also report a tiktoken count of the output')
@click.pass_context
@handle_errors
def dump(ctx: click.Context, repo: str, output: Optional[str], budget: int, fmt: str,
         paths: Optional[str], tests: bool, local: bool, exact_tokens: bool) -> None:
    """Quick dump of a single repo, no config needed."""
    console: ConsoleManager = ctx.obj['console']
    config: Config = ctx.obj['config']
    fmt = OutputFormat(fmt)

    options = FilterOptions(paths=_split_list(paths), include_tests=tests)
    options.restricted_paths()

    adapter = create_adapter(repo, config, local=local)
    output = output or f"{adapter.repo_name}-context.{fmt.extension}"

    console.print_running(f"Dumping {adapter.get_name()} (budget: {budget:,} tokens)")
    spec = GroupSpec(info=adapter.group_info(), root=adapter.resolve(), options=options)

    result = ContextBuilder(config).build([spec], budget, fmt,
                                          on_group=lambda s: _report_group(console, s))
    write_document(result.document, output)

    exact = TokenCounter(config.token_encoder).count(result.document) if exact_tokens else None
    _print_summary(console, result, output, exact, breakdown=True)


def load_context(console: ConsoleManager, config: Config, context_file: Optional[str],
                 local: Optional[str], budget: int) -> str:
    """Context for ask/chat: a prebuilt file, a local directory, or the configured repos."""
    if context_file:
        if not os.path.isfile(context_file):
            raise ConfigError(f"Context file not found: {context_file}")
        console.print_running(f"Loading context from {context_file}...")
        with open(context_file, 'r', encoding='utf-8') as f:
            return f.read()

    builder = ContextBuilder(config)
    if local:
        console.print_running("Building context from local directory...")
        specs = [local_spec(local, config)]
    else:
        project = load_config()
        if not project.repos:
            return ""
        console.print_running("Building context from configured repos...")
        specs = specs_from_project(project, config, project.output.include_tests)

    return builder.build(specs, budget, OutputFormat.MARKDOWN).document


def _llm_client(model: Optional[str]):
    from .ai import LLMClient, get_llm_config_from_env

    llm_config = get_llm_config_from_env()
    return LLMClient(api_key=llm_config['api_key'], model=model or llm_config['model'],
                     base_url=llm_config['base_url'])


@cli.command()
@click.argument('question')
@click.option('--context', '-c', 'context_file', help='Pre-built context file to use')
@click.option('--local', '-l', help='Local directory to use as context')
@click.option('--budget', '-b', type=click.IntRange(min=0), default=DUMP_BUDGET, show_default=True,
              help='Token budget for context')
@click.option('--model', '-m', help='Model name (default: LLM_MODEL)')
@click.option('--system', '-s', help='Additional system prompt instructions')
@click.option('--output', '-o', help='Save response to file')
@click.pass_context
@handle_errors
def ask(ctx: click.Context, question: str, context_file: Optional[str], local: Optional[str],
        budget: int, model: Optional[str], system: Optional[str], output: Optional[str]) -> None:
    """Ask a one-off question with repo context."""
    from .ai import ask as ask_question

    console: ConsoleManager = ctx.obj['console']
    client = _llm_client(model)
    context = load_context(console, ctx.obj['config'], context_file, local, budget)

    console.print_running(f"Asking {client.model}...")
    ask_question(client, console, question, context, system=system, output=output)


@cli.command()
@click.option('--context', '-c', 'context_file', help='Pre-built context file to use')
@click.option('--local', '-l', help='Local directory to use as context')
@click.option('--budget', '-b', type=click.IntRange(min=0), default=DUMP_BUDGET, show_default=True,
              help='Token budget for context')
@click.option('--model', '-m', help='Model name (default: LLM_MODEL)')
@click.option('--system', '-s', help='Additional system prompt instructions')
@click.pass_context
@handle_errors
def chat(ctx: click.Context, context_file: Optional[str], local: Optional[str], budget: int,
         model: Optional[str], system: Optional[str]) -> None:
    """Interactive chat using repo context."""
    from .ai import ChatSession

    console: ConsoleManager = ctx.obj['console']
    client = _llm_client(model)
    context = load_context(console, ctx.obj['config'], context_file, local, budget)
    ChatSession(client, console, context, system=system).run()


def main() -> None:
    cli(obj={})


if __name__ == '__main__':
    main()
