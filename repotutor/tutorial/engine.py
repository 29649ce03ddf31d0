"""Tutorial engine: classify, then identify, relate and explain abstractions."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from pydantic import ValidationError

from repotutor.classifier import FilteredCodebase, SmartFilter
from repotutor.config.models import GenerationConfig
from repotutor.errors import GenerationFailedError, MalformedGenerationError
from repotutor.llm.base import LLMProvider
from repotutor.tutorial.context import resolve_files
from repotutor.tutorial.models import (
    Abstraction,
    Chapter,
    Relationship,
    RelationshipAnalysis,
    TutorialResult,
)
from repotutor.tutorial.postprocess import clean_markdown
from repotutor.tutorial.prompts import (
    ABSTRACTIONS_SCHEMA,
    RELATIONSHIPS_SCHEMA,
    build_abstractions_prompt,
    build_chapter_prompt,
    build_relationships_prompt,
)
from repotutor.vcs.models import RawFile

logger = logging.getLogger(__name__)


def chapter_filename(number: int, name: str) -> str:
    """``NN_slug.md`` with every non [a-z0-9] character of the name replaced."""
    slug = re.sub(r"[^a-z0-9]", "_", name.lower())
    return f"{number:02d}_{slug}.md"


class TutorialEngine:
    """Drives the generation dialogue for one repository.

    Pipeline:
        files → SmartFilter → abstractions → relationships → chapters → TutorialResult

    Phases run in order with no retries. Chapter calls are issued one at a
    time, never concurrently, to stay inside provider rate limits.
    """

    def __init__(
        self,
        llm: LLMProvider,
        config: GenerationConfig | None = None,
        smart_filter: SmartFilter | None = None,
    ) -> None:
        self.llm = llm
        self.config = config or GenerationConfig()
        self.smart_filter = smart_filter or SmartFilter()

    async def run(
        self,
        files: Sequence[RawFile],
        project_label: str,
        output_language: str | None = None,
    ) -> TutorialResult:
        language = output_language or self.config.language

        # 1. Classify
        codebase = self.smart_filter.classify(files)

        # 2. Identify abstractions
        logger.info("Identifying abstractions for %s...", project_label)
        abstractions = await self.identify_abstractions(codebase, project_label, language)
        logger.info("Identified %d abstractions", len(abstractions))

        # 3. Analyze relationships
        logger.info("Analyzing relationships...")
        analysis = await self.analyze_relationships(abstractions, project_label, language)
        logger.info("Found %d relationships", len(analysis.relationships))

        # 4. Generate chapters, sequentially
        chapters: list[Chapter] = []
        for number, abstraction in enumerate(abstractions, start=1):
            logger.info(
                "Writing chapter %d/%d: %s", number, len(abstractions), abstraction.name
            )
            chapters.append(
                await self.generate_chapter(
                    codebase, abstraction, number, abstractions, project_label, language
                )
            )

        # 5. Assemble
        return TutorialResult(
            project_name=project_label,
            framework=codebase.stats.framework,
            abstractions=abstractions,
            relationships=analysis.relationships,
            summary=analysis.summary,
            chapters=chapters,
            stats=codebase.stats,
            provider=self.llm.name,
            model=self.llm.model,
        )

    async def identify_abstractions(
        self,
        codebase: FilteredCodebase,
        project_label: str,
        language: str,
    ) -> list[Abstraction]:
        """Ask for the core abstractions.

        Raises:
            GenerationFailedError: if the reply is unparseable or holds no
                valid abstraction.
        """
        cfg = self.config
        context_files = codebase.priority_files()[: cfg.max_context_files]
        prompt = build_abstractions_prompt(
            project_label,
            codebase.stats,
            context_files,
            language,
            file_chars=cfg.context_file_chars,
            min_count=cfg.min_abstractions,
            max_count=cfg.max_abstractions,
        )
        try:
            data = await self.llm.generate_structured(prompt, ABSTRACTIONS_SCHEMA)
        except MalformedGenerationError as e:
            raise GenerationFailedError(
                f"Could not parse abstractions from the model reply: {e}"
            ) from e

        if isinstance(data, dict) and isinstance(data.get("abstractions"), list):
            data = data["abstractions"]
        if not isinstance(data, list) or not data:
            raise GenerationFailedError(
                "The model returned no abstractions for this codebase"
            )

        abstractions: list[Abstraction] = []
        seen: set[str] = set()
        for item in data:
            try:
                abstraction = Abstraction.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping invalid abstraction %r: %s", item, e.errors()[0]["msg"])
                continue
            if abstraction.name in seen:
                logger.debug("Skipping duplicate abstraction %r", abstraction.name)
                continue
            seen.add(abstraction.name)
            abstractions.append(abstraction)

        if not abstractions:
            raise GenerationFailedError("None of the returned abstractions were usable")
        if len(abstractions) > cfg.max_abstractions:
            logger.info(
                "Keeping the first %d of %d abstractions",
                cfg.max_abstractions,
                len(abstractions),
            )
            abstractions = abstractions[: cfg.max_abstractions]
        return abstractions

    async def analyze_relationships(
        self,
        abstractions: Sequence[Abstraction],
        project_label: str,
        language: str,
    ) -> RelationshipAnalysis:
        """Ask how abstractions relate. An unparseable reply yields an empty analysis."""
        prompt = build_relationships_prompt(
            project_label,
            abstractions,
            language,
            description_chars=self.config.relationship_description_chars,
        )
        try:
            data = await self.llm.generate_structured(prompt, RELATIONSHIPS_SCHEMA)
        except MalformedGenerationError:
            logger.warning("Relationship analysis unparseable; continuing without it")
            return RelationshipAnalysis()

        if isinstance(data, list):
            data = {"relationships": data}
        if not isinstance(data, dict):
            logger.warning("Relationship analysis has unexpected shape; ignoring it")
            return RelationshipAnalysis()

        relationships: list[Relationship] = []
        for item in data.get("relationships") or []:
            try:
                relationships.append(Relationship.model_validate(item))
            except ValidationError:
                logger.debug("Skipping invalid relationship %r", item)

        known = {a.name for a in abstractions}
        dangling = [r for r in relationships if r.from_ not in known or r.to not in known]
        if dangling:
            logger.debug("%d relationships reference unknown abstractions", len(dangling))

        summary = data.get("summary")
        return RelationshipAnalysis(
            summary=summary if isinstance(summary, str) else "",
            relationships=relationships,
        )

    async def generate_chapter(
        self,
        codebase: FilteredCodebase,
        abstraction: Abstraction,
        number: int,
        abstractions: Sequence[Abstraction],
        project_label: str,
        language: str,
    ) -> Chapter:
        files = resolve_files(
            abstraction,
            codebase,
            limit=self.config.max_chapter_files,
            fallback=self.config.fallback_files,
        )
        related = [a.name for a in abstractions if a.name != abstraction.name]
        prompt = build_chapter_prompt(
            project_label, abstraction, number, files, related, language
        )
        content = await self.llm.generate_text(prompt)
        return Chapter(
            title=abstraction.name,
            content=clean_markdown(content),
            filename=chapter_filename(number, abstraction.name),
        )
