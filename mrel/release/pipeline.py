"""The release pipeline.

Stages run strictly in order; the first fatal error stops the run:

1. resolve the target version (explicit, or picked by the operator)
2. confirm it with the operator (declining ends the run cleanly)
3. test gate            (skipped with --skip-tests or in dry-run)
4. propagate versions   (always, so a dry run leaves an inspectable diff)
5. build gate           (skipped with --skip-build or in dry-run)
6. commit, if the working tree changed
7. publish every package, tolerating already-published versions
8. tag, push the tag, push the branch
9. summary

There is no rollback: after a publish or push failure the commit and any
completed publishes stay, and re-running the same version is safe.
"""

from __future__ import annotations

from mrel.core.config import ReleaseConfig
from mrel.core.result import Err, Ok, Result
from mrel.core.workspace import Workspace
from mrel.output.console import ConsoleProtocol, Style
from mrel.release import toolchain, vcs
from mrel.release.errors import ReleaseError
from mrel.release.executor import CommandExecutor, LiveExecutor, executor_for
from mrel.release.manifest import load_package, load_release_set
from mrel.release.model import Package, PackagePublish, ReleaseReport
from mrel.release.options import ReleaseOptions
from mrel.release.planner import resolve_target_version
from mrel.release.prompts import Prompter
from mrel.release.propagate import propagate
from mrel.release.publisher import PublishSettings, publish_package

__all__ = ["ReleasePipeline"]


class ReleasePipeline:
    def __init__(
        self,
        *,
        options: ReleaseOptions,
        config: ReleaseConfig,
        workspace: Workspace,
        prompter: Prompter,
        console: ConsoleProtocol,
        executor: CommandExecutor | None = None,
        inspector: CommandExecutor | None = None,
    ) -> None:
        self._options = options
        self._config = config
        self._workspace = workspace
        self._prompter = prompter
        self._console = console
        # Mutating commands follow the execution mode; inspection is always live.
        self._executor = executor or executor_for(
            options.mode, console=console, root=workspace.root
        )
        self._inspector = inspector or LiveExecutor()

    @property
    def skip(self) -> frozenset[str]:
        return self._options.skip | self._config.skip

    def run(self) -> Result[ReleaseReport, ReleaseError]:
        root = self._workspace.root

        root_pkg = load_package(root, name=root.name)
        if isinstance(root_pkg, Err):
            return root_pkg
        packages = load_release_set(self._workspace, packages_dir=self._config.packages_dir)
        if isinstance(packages, Err):
            return packages

        target = resolve_target_version(
            explicit=self._options.version,
            current=root_pkg.value.manifest.version,
            preid=self._options.preid,
            prompter=self._prompter,
        )
        if isinstance(target, Err):
            return target
        version = str(target.value)

        if not self._prompter.confirm(f"Releasing v{version}. Confirm?"):
            return Ok(ReleaseReport(status="declined", version=version, mode=self._options.mode))

        gate = self._test_gate()
        if isinstance(gate, Err):
            return gate

        propagated = self._propagate(version, root_pkg.value, packages.value)
        if isinstance(propagated, Err):
            return propagated
        released = propagated.value

        gate = self._build_gate()
        if isinstance(gate, Err):
            return gate

        committed = self._commit(version)
        if isinstance(committed, Err):
            return committed

        publishes = self._publish(version, released)
        if isinstance(publishes, Err):
            return publishes

        pushed = self._tag_and_push(version)
        if isinstance(pushed, Err):
            return pushed

        report = ReleaseReport(
            status="released",
            version=version,
            mode=self._options.mode,
            committed=committed.value,
            publishes=publishes.value,
            skipped=tuple(sorted(self.skip)),
        )
        self._summary(report)
        return Ok(report)

    def _test_gate(self) -> Result[None, ReleaseError]:
        self._console.header("Running tests...")
        if self._options.skip_tests or self._options.dry_run:
            self._console.print("(skipped)", Style.DIM)
            return Ok(None)
        return toolchain.run_tests(
            self._executor, self._config.test_command, root=self._workspace.root
        )

    def _propagate(
        self, version: str, root_pkg: Package, packages: tuple[Package, ...]
    ) -> Result[tuple[Package, ...], ReleaseError]:
        self._console.header("Updating cross dependencies...")
        result = propagate(
            version,
            root=root_pkg,
            packages=packages,
            scope=self._config.scope,
            console=self._console,
        )
        if isinstance(result, Err):
            return result
        return Ok(result.value.packages)

    def _build_gate(self) -> Result[None, ReleaseError]:
        self._console.header("Building all packages...")
        if self._options.skip_build or self._options.dry_run:
            self._console.print("(skipped)", Style.DIM)
            return Ok(None)
        return toolchain.build_all(
            self._executor, self._config.build_command, root=self._workspace.root
        )

    def _commit(self, version: str) -> Result[bool, ReleaseError]:
        root = self._workspace.root
        pending = vcs.has_pending_changes(self._inspector, root=root)
        if isinstance(pending, Err):
            return pending
        if not pending.value:
            self._console.print("No changes to commit.", Style.DIM)
            return Ok(False)

        self._console.header("Committing changes...")
        committed = vcs.commit_release(self._executor, root=root, version=version)
        if isinstance(committed, Err):
            return committed
        return Ok(True)

    def _publish(
        self, version: str, packages: tuple[Package, ...]
    ) -> Result[tuple[PackagePublish, ...], ReleaseError]:
        self._console.header("Publishing packages...")
        settings = PublishSettings(
            command=self._config.publish_command,
            skip=self.skip,
            tag_override=self._options.tag,
            next_tag_package=self._config.next_tag_package,
            already_published_markers=self._config.already_published_markers,
        )
        done: list[PackagePublish] = []
        for pkg in packages:
            result = publish_package(
                pkg,
                version,
                settings=settings,
                executor=self._executor,
                console=self._console,
            )
            if isinstance(result, Err):
                return result
            done.append(result.value)
        return Ok(tuple(done))

    def _tag_and_push(self, version: str) -> Result[None, ReleaseError]:
        root = self._workspace.root
        self._console.header(f"Pushing to {self._config.remote}...")
        tagged = vcs.create_tag(self._executor, root=root, version=version)
        if isinstance(tagged, Err):
            return tagged
        pushed = vcs.push_tag(
            self._executor, root=root, version=version, remote=self._config.remote
        )
        if isinstance(pushed, Err):
            return pushed
        return vcs.push_branch(self._executor, root=root)

    def _summary(self, report: ReleaseReport) -> None:
        if report.mode.is_dry_run:
            self._console.newline()
            self._console.print("Dry run finished - run git diff to see package changes.")

        if report.skipped:
            listing = "\n- ".join(report.skipped)
            self._console.warning(
                f"The following packages are skipped and NOT published:\n- {listing}"
            )

        already = report.names_with("already_published")
        if already:
            listing = "\n- ".join(already)
            self._console.warning(f"The following packages were already published:\n- {listing}")

        self._console.newline()
