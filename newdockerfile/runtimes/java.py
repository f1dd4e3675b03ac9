"""Java runtime plugin (Maven and Gradle)."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..models import Facts, RuntimeName, fact
from .base import Runtime
from .scripts import file_mentions
from .versions import resolve_version, tool_versions

POM_FILES = (
    "pom.xml",
    "pom.atom",
    "pom.clj",
    "pom.groovy",
    "pom.rb",
    "pom.scala",
    "pom.yml",
    "pom.yaml",
)

_MAVEN_BUILD = (
    "mvn -DoutputFile=target/mvn-dependency-list.log -B -DskipTests "
    "clean dependency:list install"
)
_GRADLE_BUILD = "./gradlew clean build -x check -x test"
_GRADLE_JAR = "$(ls -1 build/libs/*jar | grep -v plain)"


@dataclass
class JavaFacts(Facts):
    version: str = fact("Version")
    maven_version: str = fact("MavenVersion")
    gradle_version: str = fact("GradleVersion")
    build_cmd: str = fact("BuildCMD", command=True)
    start_cmd: str = fact("StartCMD", command=True)


class JavaRuntime(Runtime):
    name = RuntimeName.JAVA
    markers = ("build.gradle", "gradlew") + POM_FILES

    def generate_dockerfile(
        self, path: Path, overrides: Mapping[str, str] | None = None
    ) -> bytes:
        root = Path(path)
        facts = JavaFacts(
            version=self._jdk_version(root),
            start_cmd="java $JAVA_OPTS -jar target/*jar",
        )

        gradle = (root / "gradlew").exists()
        if gradle:
            facts.gradle_version = resolve_version(
                root, (tool_versions("gradle"),), "8", label="Gradle", logger=self.log
            )
            facts.build_cmd = _GRADLE_BUILD
            facts.start_cmd = f"java $JAVA_OPTS -jar {_GRADLE_JAR}"
        elif any((root / pom).exists() for pom in POM_FILES):
            facts.maven_version = resolve_version(
                root, (tool_versions("maven"),), "3", label="Maven", logger=self.log
            )
            facts.build_cmd = _MAVEN_BUILD

        if file_mentions(root, POM_FILES + ("build.gradle",), "org.springframework.boot"):
            self.log.info("Detected Spring Boot application")
            if gradle:
                facts.start_cmd = (
                    f"java $JAVA_OPTS -jar -Dserver.port=${{PORT}} {_GRADLE_JAR}"
                )
            else:
                facts.start_cmd = "java -Dserver.port=${PORT} $JAVA_OPTS -jar target/*jar"

        if file_mentions(root, POM_FILES, "wildfly-swarm", "org.wildfly.swarm"):
            self.log.info("Detected Wildfly Swarm application")
            facts.start_cmd = "java -Dswarm.http.port=${PORT} $JAVA_OPTS -jar target/*jar"

        self._log_defaults(
            [
                ("JDK version", facts.version),
                ("Maven version", facts.maven_version),
                ("Gradle version", facts.gradle_version),
                ("Build command", facts.build_cmd),
                ("Start command", facts.start_cmd),
            ]
        )
        template = "java-gradle.Dockerfile.j2" if gradle else "java-maven.Dockerfile.j2"
        return self._render(facts, overrides, template_name=template)

    def _jdk_version(self, root: Path) -> str:
        raw = resolve_version(
            root, (tool_versions("java"),), "17", label="JDK", logger=self.log
        )
        # Vendor-prefixed entries such as ``temurin-21.0.2`` map to their major.
        match = re.search(r"\d+", raw)
        return match.group(0) if match else "17"


__all__ = ["JavaFacts", "JavaRuntime", "POM_FILES"]
