"""Infrastructure: service wiring."""

from ..repositories import (
    ConfigRepository,
    FileRepository,
    IConfigRepository,
    IFileRepository,
)
from ..services import (
    AssembleService,
    BuildService,
    ContentService,
    ExercisesService,
    ManifestService,
    PandocService,
    RenderService,
    TocService,
    ValidationService,
)
from .container import ServiceContainer


def configure_services() -> ServiceContainer:
    """Build a container with every repository and service registered."""
    container = ServiceContainer()

    container.register(IFileRepository, lambda c: FileRepository())
    container.register(IConfigRepository, lambda c: ConfigRepository())

    container.register(ManifestService, lambda c: ManifestService(c.resolve(IConfigRepository)))
    container.register(ContentService, lambda c: ContentService(c.resolve(IFileRepository)))
    container.register(
        ValidationService,
        lambda c: ValidationService(c.resolve(IFileRepository), c.resolve(ContentService)),
    )
    container.register(TocService, lambda c: TocService(c.resolve(IFileRepository)))
    container.register(AssembleService, lambda c: AssembleService(c.resolve(IFileRepository)))
    container.register(PandocService, lambda c: PandocService(c.resolve(IFileRepository)))
    container.register(RenderService, lambda c: RenderService(c.resolve(IFileRepository)))
    container.register(ExercisesService, lambda c: ExercisesService())
    container.register(
        BuildService,
        lambda c: BuildService(
            c.resolve(ValidationService),
            c.resolve(PandocService),
            c.resolve(ExercisesService),
        ),
    )

    return container


__all__ = ["ServiceContainer", "configure_services"]
