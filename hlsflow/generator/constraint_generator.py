"""
Constraint file generator.

Serializes pin assignments into the XML constraint format read by the FDE
place and route tools:

    <design name="top">
      <port name="a[0]" position="P151"/>
    </design>
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from hlsflow.generator.base_generator import BaseGenerator
from hlsflow.model import ConstraintArtifact, PinAssignment

logger = logging.getLogger(__name__)


class ConstraintGenerator(BaseGenerator):
    """Renders and persists constraint artifacts."""

    TEMPLATE = "constraint.xml.j2"

    def __init__(self, template_dir: Optional[str] = None):
        super().__init__(template_dir)

    def generate(self, artifact: ConstraintArtifact) -> str:
        """Render the constraint XML for an artifact."""
        template = self.env.get_template(self.TEMPLATE)
        return template.render(
            design_name=artifact.design_name,
            assignments=artifact.assignments,
        )

    def synthesize(
        self,
        module_name: str,
        assignments: Sequence[PinAssignment],
        destination: Union[str, Path],
    ) -> Path:
        """
        Persist a constraint file unless one already exists.

        An existing file is returned untouched, without checking it against
        the current design.

        Args:
            module_name: Design (top module) name
            assignments: Pin assignments in port order
            destination: Constraint file path

        Returns:
            Path of the constraint file
        """
        destination = Path(destination)
        if destination.exists():
            logger.info("Constraint file %s exists, not regenerating", destination)
            return destination

        artifact = ConstraintArtifact(design_name=module_name, assignments=list(assignments))
        content = self.generate(artifact)
        self.write_atomic(destination, content)
        logger.info(
            "Wrote %d pin constraint(s) for %s to %s",
            len(artifact.assignments),
            module_name,
            destination,
        )
        return destination
