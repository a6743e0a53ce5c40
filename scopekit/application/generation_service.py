"""AI generation flows.

Each flow builds a prompt from the current forest, waits for the text
generator in a worker thread, and then applies the response to whatever
forest is current when it arrives. The forest is not locked while the
request is in flight: if the target scope was deleted or moved in the
meantime, the flow reports it as not found instead of applying anything.

Generator failures are returned as ``Err("AI generation failed: ...")``
and never retried.
"""

import asyncio
import json
import logging

from scopekit.application.ingestion_service import (
    EMPTY_OUTLINE_ERROR,
    IngestedOutline,
    ingest_outline,
)
from scopekit.application.patch_service import AlternativeProposal, PatchOutcome
from scopekit.application.ports import DEFAULT_MAX_OUTPUT_TOKENS, TextGenerator
from scopekit.application.store import ScopeStore
from scopekit.domain.project import UNASSIGNED_ID
from scopekit.domain.shared import Err, Ok, Result
from scopekit.domain.task import (
    Comment,
    CommentStatus,
    Provenance,
    Summary,
    Task,
    find_owner,
    scan_dependencies,
)

logger = logging.getLogger(__name__)

# Upper bound on dependency candidates listed in an alternative prompt
MAX_DEPENDENCY_CANDIDATES = 50

OUTLINE_SYSTEM_PROMPT = """You break goals down into structured plans.
Respond with exactly one JSON object that has exactly one root key.
Keys are short human-readable titles (no underscores). Values are nested
objects, arrays or strings. Do not wrap the JSON in code fences and do not
add any text outside it."""

ALTERNATIVE_SYSTEM_PROMPT = """You produce JSON only. No code fences.
The response MUST contain exactly three top-level keys:
- "New Task Outline": one JSON object with exactly one root key holding the
  replacement outline for the selected item.
- "Updates": a list of minimal patches to items that truly reference the
  selected item. Each patch has "Target Id" and "Changes"; every change has
  "Path" ("/text" or "/description" only), "Op" ("replace" or "update"),
  "Value" and an optional "Reason".
- "Changes Summary": an object with "Replaced Node Title", "Updated Targets"
  and optional "Notes"."""

EXECUTE_SYSTEM_PROMPT = """You are an experienced consultant carrying out one
item of a larger plan. Work through the item as a short case study: state
the approach, do the work, and finish with concrete results or next steps.
Answer in plain markdown."""

SUMMARY_SYSTEM_PROMPT = """You write short progress summaries that can be
pasted into an email. Use markdown with "-" bullets.
Start with a one-line summary, then list the key scope updates.
Only mention accepted comments that change the picture, and fold in any
execution results. When a previous summary is given, focus on what changed
since then."""

# Summaries are shorter than outlines
SUMMARY_MAX_OUTPUT_TOKENS = 2000


def build_outline_prompt(
    goal: str,
    project_name: str | None = None,
    existing: list[str] | None = None,
) -> str:
    """Build the prompt asking for an outline of ``goal``."""
    parts = [f'Goal: "{goal}"']
    if project_name:
        parts.append(f'This is part of a larger folder named "{project_name}".')
    if existing:
        parts.append("Items that already exist here (do not repeat them):")
        parts.extend(f"- {text}" for text in existing)
    parts.append("Return the breakdown as one JSON object with a single root key.")
    return "\n".join(parts)


def _minimal_tree(tasks: list[Task]) -> list[dict]:
    return [
        {
            "id": task.id,
            "text": task.text,
            "description": task.description,
            "children": _minimal_tree(task.subtasks),
        }
        for task in tasks
    ]


def build_alternative_prompt(store: ScopeStore, task: Task) -> str:
    """Build the prompt asking for a replacement of ``task``."""
    owner = find_owner(store.projects, task.id)
    path = store.breadcrumb(task.id)
    parts = [
        "Replace one item with a distinct alternative at the same level, "
        "keeping a similar format and nesting depth.",
        f"Selected item:\n- Text: {task.text}\n- Description: {task.description}\n"
        f"- Children: {len(task.subtasks)}",
    ]
    if len(path) > 1:
        parts.append(f"Parent path: {' > '.join(path[:-1])}")
    if owner is not None:
        if not owner.is_unassigned:
            parts.append(f"Folder: {owner.name}")
        candidates = [c for c in scan_dependencies(owner.tasks, task.text) if c.id != task.id]
        if candidates:
            parts.append("Potentially related items (for targeted updates only):")
            for candidate in candidates[:MAX_DEPENDENCY_CANDIDATES]:
                line = f"- {candidate.id} @ {candidate.path}: {candidate.text}"
                if candidate.description:
                    line += f" | {candidate.description}"
                parts.append(line)
        parts.append(json.dumps({"name": owner.name, "tasks": _minimal_tree(owner.tasks)}))
    parts.append(
        "Only update items that reference the selected item, only their /text "
        "or /description, with minimal wording changes."
    )
    return "\n\n".join(parts)


def build_execute_prompt(store: ScopeStore, task: Task, instructions: str | None = None) -> str:
    """Build the prompt asking the model to carry out ``task``."""
    owner = find_owner(store.projects, task.id)
    parts = [f"Item: {task.text}"]
    if task.description:
        parts.append(f"Description: {task.description}")
    if task.subtasks:
        parts.append("Steps:")
        parts.extend(f"- {child.text}" for child in task.subtasks)
    if owner is not None and not owner.is_unassigned:
        parts.append(f'Folder: "{owner.name}"')
        others = [t.text for t in owner.tasks if t.id != task.id]
        if others:
            parts.append("Other items in this folder:")
            parts.extend(f"- {text}" for text in others)
    if instructions:
        parts.append(f"Additional instructions: {instructions}")
    return "\n".join(parts)


def _accepted_comments(comments: list[Comment]) -> list[str]:
    texts = []
    for comment in comments:
        if comment.status == CommentStatus.ACCEPTED:
            texts.append(comment.text)
        texts.extend(_accepted_comments(comment.replies))
    return texts


def _summary_tree(tasks: list[Task]) -> list[dict]:
    nodes = []
    for task in tasks:
        node = {"text": task.text, "status": task.status.value}
        if task.description:
            node["description"] = task.description
        comments = _accepted_comments(task.comments)
        if comments:
            node["acceptedComments"] = comments
        if task.execution_results:
            node["executionResults"] = [r.result_text for r in task.execution_results]
        if task.subtasks:
            node["children"] = _summary_tree(task.subtasks)
        nodes.append(node)
    return nodes


def build_summary_prompt(name: str, tasks: list[Task], previous: Summary | None = None) -> str:
    """Build the prompt asking for a progress summary of ``tasks``."""
    parts = [
        f'Summarize the progress of "{name}".',
        json.dumps(_summary_tree(tasks), indent=2),
    ]
    if previous is not None:
        parts.append(f"Previous summary:\n{previous.text}")
    return "\n\n".join(parts)


async def _generate(
    generator: TextGenerator,
    prompt: str,
    max_output_tokens: int,
    system: str = OUTLINE_SYSTEM_PROMPT,
) -> Result[str, str]:
    result = await asyncio.to_thread(generator.generate, prompt, system, max_output_tokens)
    if isinstance(result, Err):
        logger.error(f"Generation failed: {result.error}")
        return Err(f"AI generation failed: {result.error}")
    return result


async def generate_scopes(
    store: ScopeStore,
    generator: TextGenerator,
    goal: str,
    project_id: str = UNASSIGNED_ID,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Result[str, str]:
    """Generate a new root scope for ``goal`` with its breakdown as children.

    Returns:
        Ok(id of the new root scope) or Err(str)
    """
    project = store.find_project(project_id)
    if project is None:
        return Err(f"Folder not found: {project_id}")
    existing = [] if project.is_unassigned else [t.text for t in project.tasks]
    prompt = build_outline_prompt(goal, None if project.is_unassigned else project.name, existing)

    logger.info(f"Requesting scopes for '{goal}'")
    response = await _generate(generator, prompt, max_output_tokens)
    if isinstance(response, Err):
        return response

    ingested = ingest_outline(
        response.value, heading_words=store.heading_words, unwrap_single_root=True
    )
    if ingested.is_empty:
        return Err(EMPTY_OUTLINE_ERROR)

    root = Task(text=goal, source=Provenance.AI)
    root.subtasks = [
        task.model_copy(update={"parent_id": root.id}) for task in ingested.tasks
    ]
    if not store.add_root_tasks(project_id, [root], label=f"Generate scopes for '{goal}'"):
        return Err(f"Folder not found: {project_id}")
    return Ok(root.id)


async def generate_subscopes(
    store: ScopeStore,
    generator: TextGenerator,
    task_id: str,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Result[IngestedOutline, str]:
    """Append generated sub-scopes under an existing scope."""
    task = store.find_task(task_id)
    if task is None:
        return Err(f"Scope not found: {task_id}")
    owner = find_owner(store.projects, task_id)
    project_name = None if owner is None or owner.is_unassigned else owner.name
    prompt = build_outline_prompt(task.text, project_name, [t.text for t in task.subtasks])

    logger.info(f"Requesting sub-scopes for '{task.text}'")
    response = await _generate(generator, prompt, max_output_tokens)
    if isinstance(response, Err):
        return response

    return store.insert_outline(
        response.value,
        anchor_id=task_id,
        unwrap_single_root=True,
        label=f"Generate sub-scopes for '{task.text}'",
    )


async def regenerate_subscopes(
    store: ScopeStore,
    generator: TextGenerator,
    task_id: str,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Result[IngestedOutline, str]:
    """Replace a scope's children with a freshly generated breakdown."""
    task = store.find_task(task_id)
    if task is None:
        return Err(f"Scope not found: {task_id}")
    owner = find_owner(store.projects, task_id)
    project_name = None if owner is None or owner.is_unassigned else owner.name
    prompt = build_outline_prompt(task.text, project_name)

    logger.info(f"Requesting replacement sub-scopes for '{task.text}'")
    response = await _generate(generator, prompt, max_output_tokens)
    if isinstance(response, Err):
        return response

    ingested = ingest_outline(
        response.value,
        parent_id=task_id,
        heading_words=store.heading_words,
        unwrap_single_root=True,
    )
    if ingested.is_empty:
        return Err(EMPTY_OUTLINE_ERROR)
    if not store.replace_subtasks(task_id, ingested.tasks):
        return Err(f"Scope not found: {task_id}")
    return Ok(ingested)


async def generate_alternative(
    store: ScopeStore,
    generator: TextGenerator,
    task_id: str,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Result[PatchOutcome, str]:
    """Replace a scope with a generated alternative and patch its dependents."""
    task = store.find_task(task_id)
    if task is None:
        return Err(f"Scope not found: {task_id}")
    prompt = build_alternative_prompt(store, task)

    logger.info(f"Requesting an alternative for '{task.text}'")
    response = await asyncio.to_thread(
        generator.generate_structured, prompt, ALTERNATIVE_SYSTEM_PROMPT, max_output_tokens
    )
    if isinstance(response, Err):
        logger.error(f"Generation failed: {response.error}")
        return Err(f"AI generation failed: {response.error}")

    proposal = AlternativeProposal.from_json(response.value)
    if isinstance(proposal, Err):
        return Err(f"AI generation failed: {proposal.error}")
    return store.apply_alternative(task_id, proposal.value)


async def execute_scope(
    store: ScopeStore,
    generator: TextGenerator,
    task_id: str,
    instructions: str | None = None,
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
) -> Result[str, str]:
    """Have the model carry out a scope and record the result on it.

    The result is prepended to the scope's execution results.

    Returns:
        Ok(result text) or Err(str)
    """
    task = store.find_task(task_id)
    if task is None:
        return Err(f"Scope not found: {task_id}")
    prompt = build_execute_prompt(store, task, instructions)

    logger.info(f"Executing '{task.text}'")
    response = await _generate(generator, prompt, max_output_tokens, EXECUTE_SYSTEM_PROMPT)
    if isinstance(response, Err):
        return response
    if not response.value:
        return Err("AI generation failed: empty response")

    if not store.add_execution_result(task_id, response.value):
        return Err(f"Scope not found: {task_id}")
    return Ok(response.value)


async def summarize_project(
    store: ScopeStore,
    generator: TextGenerator,
    project_id: str,
    task_id: str | None = None,
    max_output_tokens: int = SUMMARY_MAX_OUTPUT_TOKENS,
) -> Result[str, str]:
    """Summarize a folder, or one scope inside it, and store the summary.

    The newest earlier summary of the same target is included in the
    prompt so the model can focus on what changed since.
    """
    project = store.find_project(project_id)
    if project is None:
        return Err(f"Folder not found: {project_id}")
    if task_id is not None:
        task = store.find_task(task_id)
        if task is None:
            return Err(f"Scope not found: {task_id}")
        name, tasks, summaries = task.text, [task], task.summaries
    else:
        name, tasks, summaries = project.name, project.tasks, project.summaries
    prompt = build_summary_prompt(name, tasks, summaries[0] if summaries else None)

    logger.info(f"Summarizing '{name}'")
    response = await _generate(generator, prompt, max_output_tokens, SUMMARY_SYSTEM_PROMPT)
    if isinstance(response, Err):
        return response
    if not response.value:
        return Err("AI generation failed: empty response")

    if task_id is not None:
        if not store.add_summary_to_task(task_id, response.value):
            return Err(f"Scope not found: {task_id}")
    elif not store.add_summary_to_project(project_id, response.value):
        return Err(f"Folder not found: {project_id}")
    return Ok(response.value)
