"""Markdown PR description templates.

Three layouts (standard, minimal, detailed) in English and French, built
from a ChangeSummary. Commit messages are turned into readable bullets by
an ordered rewrite table where the first matching pattern wins.
"""

from __future__ import annotations

import random
import re

from prpilot_core.analyzer import analyze_branch
from prpilot_core.git.models import ChangeSummary
from prpilot_core.git.repository import GitRepository
from prpilot_core.title import infer_title

TEMPLATES = ("standard", "detailed", "minimal")
LANGUAGES = ("en", "fr")

_PREFIX = r"(\(.+\))?:?\s*"

_HUMANIZE_RULES: dict[str, list[tuple[re.Pattern, str]]] = {
    "en": [
        (re.compile(rf"^feat{_PREFIX}", re.IGNORECASE), "Adds "),
        (re.compile(rf"^add{_PREFIX}", re.IGNORECASE), "Adds "),
        (re.compile(rf"^fix{_PREFIX}", re.IGNORECASE), "Fixes "),
        (re.compile(rf"^update{_PREFIX}", re.IGNORECASE), "Updates "),
        (re.compile(rf"^refactor{_PREFIX}", re.IGNORECASE), "Refactors "),
        (re.compile(rf"^(?:remove|delete){_PREFIX}", re.IGNORECASE), "Removes "),
        (re.compile(rf"^implement{_PREFIX}", re.IGNORECASE), "Implements "),
        (re.compile(rf"^improve{_PREFIX}", re.IGNORECASE), "Improves "),
        (re.compile(rf"^enhance{_PREFIX}", re.IGNORECASE), "Enhances "),
        (re.compile(rf"^optimize{_PREFIX}", re.IGNORECASE), "Optimizes "),
        (re.compile(rf"^style{_PREFIX}", re.IGNORECASE), "Updates styling for "),
        (re.compile(rf"^chore{_PREFIX}", re.IGNORECASE), "Maintenance: "),
        (re.compile(rf"^docs{_PREFIX}", re.IGNORECASE), "Documentation: "),
        (re.compile(rf"^test{_PREFIX}", re.IGNORECASE), "Tests: "),
    ],
    "fr": [
        (re.compile(rf"^feat{_PREFIX}", re.IGNORECASE), "Ajoute "),
        (re.compile(rf"^add{_PREFIX}", re.IGNORECASE), "Ajoute "),
        (re.compile(rf"^fix{_PREFIX}", re.IGNORECASE), "Corrige "),
        (re.compile(rf"^update{_PREFIX}", re.IGNORECASE), "Met à jour "),
        (re.compile(rf"^refactor{_PREFIX}", re.IGNORECASE), "Refactorise "),
        (re.compile(rf"^(?:remove|delete){_PREFIX}", re.IGNORECASE), "Supprime "),
        (re.compile(rf"^implement{_PREFIX}", re.IGNORECASE), "Implémente "),
        (re.compile(rf"^(?:improve|enhance){_PREFIX}", re.IGNORECASE), "Améliore "),
        (re.compile(rf"^optimize{_PREFIX}", re.IGNORECASE), "Optimise "),
        (re.compile(rf"^style{_PREFIX}", re.IGNORECASE), "Met à jour le style de "),
        (re.compile(rf"^chore{_PREFIX}", re.IGNORECASE), "Maintenance : "),
        (re.compile(rf"^docs{_PREFIX}", re.IGNORECASE), "Documentation : "),
        (re.compile(rf"^test{_PREFIX}", re.IGNORECASE), "Tests : "),
    ],
}

_IMPLEMENTATION_KEYWORDS = ("refactor", "architecture", "optimize", "implement", "migrate", "restructure")

GIF_CATEGORIES: dict[str, list[str]] = {
    "feature": [
        "https://media.giphy.com/media/3o7btPCcdNniyf0ArS/giphy.gif",
        "https://media.giphy.com/media/l0MYt5jPR6QX5pnqM/giphy.gif",
        "https://media.giphy.com/media/26ufdipQqU2lhNA4g/giphy.gif",
    ],
    "fix": [
        "https://media.giphy.com/media/3o7aCRloybJlXNLGk0/giphy.gif",
        "https://media.giphy.com/media/3o7aTskTEUldX6sVj2/giphy.gif",
    ],
    "docs": [
        "https://media.giphy.com/media/3o7aCRloybJlXNLGk0/giphy.gif",
        "https://media.giphy.com/media/26ufdipQqU2lhNA4g/giphy.gif",
    ],
    "test": [
        "https://media.giphy.com/media/3o7btPCcdNniyf0ArS/giphy.gif",
        "https://media.giphy.com/media/26ufdipQqU2lhNA4g/giphy.gif",
    ],
    "refactor": [
        "https://media.giphy.com/media/3o7aCRloybJlXNLGk0/giphy.gif",
        "https://media.giphy.com/media/3o7aTskTEUldX6sVj2/giphy.gif",
    ],
    "breaking": [
        "https://media.giphy.com/media/3o7btPCcdNniyf0ArS/giphy.gif",
        "https://media.giphy.com/media/3o7aTskTEUldX6sVj2/giphy.gif",
    ],
    "default": [
        "https://media.giphy.com/media/3o7aCRloybJlXNLGk0/giphy.gif",
        "https://media.giphy.com/media/3o7btPCcdNniyf0ArS/giphy.gif",
        "https://media.giphy.com/media/26ufdipQqU2lhNA4g/giphy.gif",
    ],
}

# Commit-type tag -> GIF category, highest priority first.
_GIF_PRIORITY = (("feat", "feature"), ("fix", "fix"), ("test", "test"), ("refactor", "refactor"), ("docs", "docs"))

# Matches the first markdown image; review sections are spliced in front of it.
IMAGE_MARKER_RE = re.compile(r"!\[.*?\]\(.*?\)")

_TEXT = {
    "en": {
        "what": "**What does this PR change or add?**",
        "empty": "- This PR contains {commits} commits with {files} modified files.",
        "test_steps": "**Any steps needed to test it?**\n\n- Run the test suite\n- Verify modified functionality\n- Test main use cases",
        "details": "**Notable implementation details:**",
        "ui": "- User interface modifications",
        "logic": "- Business logic changes",
        "config": "- Configuration updates",
        "no_details": "- No specific implementation details",
        "deploy": "**Deployment steps:**\n\n- No migrations or config updates required\n- Service restart if necessary\n- Post-deployment verification",
        "stats": "**Stats:** {files} files changed, +{insertions} -{deletions} across {commits} commits",
        "notes": "### 🚨 Important notes",
        "breaking": "- ⚠️ **Breaking changes detected**",
        "no_breaking": "- ✅ No breaking changes",
        "tests": "- ✅ Tests included",
        "no_tests": "- ⚠️ No tests added",
        "reviewers": "### 👥 Suggested reviewers\nTo be determined based on modified files",
        "links": "### 🔗 Links\n- Related issue: #XXX\n- Documentation: [Link to docs]",
    },
    "fr": {
        "what": "**Que fait cette PR ou qu'ajoute-t-elle ?**",
        "empty": "- Cette PR contient {commits} commits avec {files} fichiers modifiés.",
        "test_steps": "**Étapes nécessaires pour la tester ?**\n\n- Exécuter les tests\n- Vérifier les fonctionnalités modifiées\n- Tester les cas d'usage principaux",
        "details": "**Détails d'implémentation notables :**",
        "ui": "- Modifications de l'interface utilisateur",
        "logic": "- Changements dans la logique métier",
        "config": "- Mise à jour de la configuration",
        "no_details": "- Aucun détail d'implémentation spécifique",
        "deploy": "**Étapes de déploiement :**\n\n- Aucune migration ou mise à jour de configuration requise\n- Redémarrage des services si nécessaire\n- Vérification post-déploiement",
        "stats": "**Statistiques :** {files} fichiers modifiés, +{insertions} -{deletions} sur {commits} commits",
        "notes": "### 🚨 Notes importantes",
        "breaking": "- ⚠️ **Changements incompatibles détectés**",
        "no_breaking": "- ✅ Aucun changement incompatible",
        "tests": "- ✅ Tests inclus",
        "no_tests": "- ⚠️ Aucun test ajouté",
        "reviewers": "### 👥 Relecteurs suggérés\nÀ déterminer selon les fichiers modifiés",
        "links": "### 🔗 Liens\n- Issue liée : #XXX\n- Documentation : [Lien vers la doc]",
    },
}


def humanize_commit(message: str, language: str = "en") -> str:
    """Rewrite a conventional prefix into prose using the first matching rule."""
    for pattern, replacement in _HUMANIZE_RULES[language]:
        if pattern.match(message):
            message = pattern.sub(replacement, message, count=1)
            break
    if not message:
        return message
    return message[0].lower() + message[1:]


def humanize_commits(summary: ChangeSummary, language: str = "en") -> str:
    return "\n".join(f"- {humanize_commit(m, language)}" for m in summary.commit_messages)


def select_gif(summary: ChangeSummary, rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    if summary.has_breaking_change:
        return rng.choice(GIF_CATEGORIES["breaking"])
    for tag, category in _GIF_PRIORITY:
        if tag in summary.commit_types:
            return rng.choice(GIF_CATEGORIES[category])
    return rng.choice(GIF_CATEGORIES["default"])


def _implementation_details(summary: ChangeSummary, text: dict) -> str:
    notable = [m for m in summary.commit_messages if any(k in m.lower() for k in _IMPLEMENTATION_KEYWORDS)]
    if notable:
        return "\n".join(f"- {m}" for m in notable)

    paths = summary.file_paths
    details = []
    if any(k in p for p in paths for k in ("component", "ui", "css")):
        details.append(text["ui"])
    if any(k in p for p in paths for k in ("service", "util", "helper")):
        details.append(text["logic"])
    if any(k in p for p in paths for k in ("config", ".env", "package.json", "pyproject.toml")):
        details.append(text["config"])
    return "\n".join(details) or text["no_details"]


def _stats_line(summary: ChangeSummary, text: dict) -> str:
    return text["stats"].format(
        files=summary.files_changed,
        insertions=summary.insertions,
        deletions=summary.deletions,
        commits=summary.total_commits,
    )


def _render_standard(summary, text, changes, include_stats, gif) -> str:
    changes = changes or text["empty"].format(commits=summary.total_commits, files=summary.files_changed)
    sections = [
        "## Description",
        text["what"],
        changes,
        text["test_steps"],
        text["details"],
        _implementation_details(summary, text),
        text["deploy"],
    ]
    if include_stats:
        sections.append(_stats_line(summary, text))
    sections.append(f"**Gif:**\n\n![PR GIF]({gif})")
    return "\n\n".join(sections)


def _render_minimal(summary, title, gif) -> str:
    commits = "\n".join(f"- {m}" for m in summary.commit_messages)
    return (
        f"![GIF]({gif})\n\n"
        f"## {title or summary.current_branch}\n\n"
        f"{commits}\n\n"
        f"**Impact:** {summary.files_changed} files | +{summary.insertions} -{summary.deletions}"
    )


def _render_notes(summary, text) -> str:
    return "\n\n".join(
        [
            "\n".join(
                [
                    text["notes"],
                    text["breaking"] if summary.has_breaking_change else text["no_breaking"],
                    text["tests"] if summary.has_tests else text["no_tests"],
                ]
            ),
            text["reviewers"],
            text["links"],
        ]
    )


def render_description(
    summary: ChangeSummary,
    template: str = "standard",
    language: str = "en",
    title: str | None = None,
    include_stats: bool = True,
    changes: str | None = None,
    rng: random.Random | None = None,
) -> str:
    """Render a markdown PR description for ``summary``.

    ``changes`` replaces the humanized commit list in the standard and
    detailed layouts when given.
    """
    if template not in TEMPLATES:
        raise ValueError(f"Unknown template: {template!r}. Choose one of {', '.join(TEMPLATES)}.")
    if language not in LANGUAGES:
        raise ValueError(f"Unknown language: {language!r}. Choose one of {', '.join(LANGUAGES)}.")

    text = _TEXT[language]
    gif = select_gif(summary, rng)

    if template == "minimal":
        return _render_minimal(summary, title, gif)

    if changes is None:
        changes = humanize_commits(summary, language)
    body = _render_standard(summary, text, changes, include_stats, gif)
    if template == "detailed":
        body = f"{body}\n\n{_render_notes(summary, text)}"
    return body


def insert_review_section(description: str, review_text: str, spliced: bool = True) -> str:
    """Add a delimited review section to a description.

    With ``spliced`` the section goes right before the first markdown image
    (the GIF) when there is one; otherwise it is appended.
    """
    section = f"\n\n---\n\n## 🤖 AI Code Review\n\n{review_text}\n\n---"
    if spliced:
        match = IMAGE_MARKER_RE.search(description)
        if match:
            return description[: match.start()] + section + "\n\n" + description[match.start() :]
        return description + section
    return description + "\n\n" + section


def generate_description(
    title: str | None = None,
    template: str = "standard",
    language: str = "en",
    include_stats: bool = True,
    base_branch: str | None = None,
    repo: GitRepository | None = None,
) -> str:
    summary = analyze_branch(base_branch, detailed=True, repo=repo)
    return render_description(summary, template=template, language=language, title=title, include_stats=include_stats)


def generate_complete(
    template: str = "standard",
    language: str = "en",
    include_stats: bool = True,
    max_title_length: int | None = None,
    base_branch: str | None = None,
    repo: GitRepository | None = None,
) -> dict:
    """Title and description for the current branch from a single analysis."""
    summary = analyze_branch(base_branch, detailed=True, repo=repo)
    title = infer_title(summary.commit_messages, summary.file_paths, max_title_length).rendered
    description = render_description(
        summary, template=template, language=language, title=title, include_stats=include_stats
    )
    return {"title": title, "description": description}
