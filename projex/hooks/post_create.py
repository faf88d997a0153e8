"""Optional steps offered after a project has been created.

Opening an editor, running an AI assistant, starting the dev server and
printing deployment instructions are all conveniences: any failure is
reported as a warning with manual instructions and never turns a
successful scaffold into a failed one.
"""

from __future__ import annotations

import os
from pathlib import Path

from projex.scaffolder.collector import Prompter
from projex.utils import Logger, quiet_logger, run_command

from .executor import CommandRunner

GEMINI_CLI = "npx https://github.com/google-gemini/gemini-cli"

EDITOR_CHOICES: dict[str, str] = {
    "Open in VS Code": "vscode",
    "Open in current directory (for terminal editors)": "terminal",
    "Skip - I'll open it myself": "skip",
}

DEPLOY_CHOICES: dict[str, str] = {
    "Set up Vercel deployment": "vercel",
    "Set up Netlify deployment": "netlify",
    "Set up Cloudflare Pages deployment": "cloudflare",
    "Skip deployment for now": "skip",
}

DEPLOY_INSTRUCTIONS: dict[str, tuple[str, list[str]]] = {
    "vercel": ("Vercel", [
        "  1. Install Vercel CLI: npm i -g vercel",
        "  2. Run: vercel",
        "  3. Follow the prompts to deploy your project",
    ]),
    "netlify": ("Netlify", [
        "  1. Install Netlify CLI: npm i -g netlify-cli",
        "  2. Run: netlify deploy",
        "  3. Follow the prompts to deploy your project",
    ]),
    "cloudflare": ("Cloudflare Pages", [
        "  1. Install Wrangler CLI: npm i -g wrangler",
        "  2. Run: wrangler pages project create",
        "  3. Follow the prompts to deploy your project",
    ]),
}


async def _interactive_runner(command: str | list[str], cwd: Path) -> tuple[int, str, str]:
    # Output goes straight to the terminal; dev servers run until Ctrl+C.
    return await run_command(command, cwd=cwd, timeout=None, capture=False)


class PostCreateFlow:
    """Walks the user through the optional next steps.

    Args:
        prompter: Source of yes/no and selection answers.
        runner: Coroutine executing a shell command in a directory.
        logger: Where progress and instructions go.
    """

    def __init__(
        self,
        prompter: Prompter,
        runner: CommandRunner | None = None,
        logger: Logger | None = None,
    ) -> None:
        self.prompter = prompter
        self.runner = runner or _interactive_runner
        self.logger = logger or quiet_logger()

    async def run(
        self,
        target_dir: Path,
        *,
        interactive: bool = True,
        open_editor: bool = False,
    ) -> None:
        log = self.logger
        relative = os.path.relpath(target_dir)

        log.nl()
        log.title("🚀 Get started:")
        log.info(f"  📁 Navigate to your project: cd {relative}")

        if open_editor:
            await self.open_in_vscode(target_dir)
        elif interactive:
            await self.choose_editor(target_dir)

        if interactive:
            await self.offer_ai_assistant(target_dir)
            await self.offer_dev_server(target_dir)
            await self.offer_deployment()
        else:
            log.nl()
            log.info("You can start the development server with: npm run dev")

        log.nl()
        log.success("🎉 All set! Happy coding!")

    # -- Editor -------------------------------------------------------------

    async def choose_editor(self, target_dir: Path) -> None:
        self.logger.nl()
        self.logger.title("💻 Code Editor Options:")
        label = await self.prompter.select(
            "Would you like to open the project in a code editor?",
            list(EDITOR_CHOICES),
            next(iter(EDITOR_CHOICES)),
        )
        choice = EDITOR_CHOICES.get(label or "", "skip")

        if choice == "vscode":
            await self.open_in_vscode(target_dir)
        elif choice == "terminal":
            self.logger.info("Opening terminal in project directory...")
            os.chdir(target_dir)
            self.logger.success(f"Current directory changed to: {target_dir}")

    async def open_in_vscode(self, target_dir: Path) -> bool:
        self.logger.info("Opening in VS Code...")
        try:
            returncode, _stdout, stderr = await self.runner(["code", str(target_dir)], target_dir)
        except OSError as exc:
            returncode, stderr = -1, str(exc)

        if returncode == 0:
            self.logger.success("✅ Project opened in VS Code!")
            return True

        self.logger.debug(f"VS Code launch failed: {stderr}")
        self.logger.warn(
            "💡 Couldn't open VS Code automatically. "
            "You can open your project folder manually in any code editor!"
        )
        self.logger.info(
            "   Tip: Make sure VS Code is installed and the 'code' command is available in your PATH."
        )
        return False

    # -- AI assistant -------------------------------------------------------

    async def offer_ai_assistant(self, target_dir: Path) -> None:
        log = self.logger
        log.nl()
        log.title("🤖 AI Assistant Option:")
        log.info("Need help customizing your project? You can use Gemini CLI to get AI assistance!")

        if not await self.prompter.confirm(
            "Would you like to use Gemini CLI for AI assistance with customization?", False
        ):
            return

        log.nl()
        log.title("🚀 Gemini CLI Setup:")
        log.info(f"  📦 Quick run: {GEMINI_CLI}")
        log.info("  🌐 Or install globally: npm install -g @google/gemini-cli")

        if not await self.prompter.confirm("Would you like to run Gemini CLI now?", True):
            return

        log.info("🔄 Running Gemini CLI...")
        try:
            returncode, _stdout, _stderr = await self.runner(GEMINI_CLI, target_dir)
        except OSError:
            returncode = -1
        if returncode != 0:
            log.warn("⚠️ Could not run Gemini CLI automatically. You can run it manually later:")
            log.info(f"  {GEMINI_CLI}")

    # -- Dev server ---------------------------------------------------------

    async def offer_dev_server(self, target_dir: Path) -> None:
        self.logger.nl()
        self.logger.title("🌐 Development Server:")

        if not await self.prompter.confirm(
            "Would you like to start the development server now?", True
        ):
            self.logger.info("You can start the development server later with: npm run dev")
            return

        await self.start_dev_server(target_dir)

    async def start_dev_server(self, target_dir: Path) -> bool:
        log = self.logger
        log.info("Installing dependencies first...")
        try:
            returncode, _stdout, _stderr = await self.runner("npm install", target_dir)
            if returncode == 0:
                log.success("✅ Dependencies installed!")
                log.info("💡 Press Ctrl+C to stop the server when you're done")
                returncode, _stdout, _stderr = await self.runner("npm run dev", target_dir)
        except OSError:
            returncode = -1

        if returncode == 0:
            return True

        log.warn(
            "⚠️ Could not start development server automatically. "
            "You can start it manually with:"
        )
        log.info(f"  cd {os.path.relpath(target_dir)}")
        log.info("  npm install")
        log.info("  npm run dev")
        return False

    # -- Deployment ---------------------------------------------------------

    async def offer_deployment(self) -> None:
        self.logger.nl()
        self.logger.title("🚀 Deployment Options:")
        label = await self.prompter.select(
            "Would you like to set up deployment for your project?",
            list(DEPLOY_CHOICES),
            "Skip deployment for now",
        )
        self.print_deploy_instructions(DEPLOY_CHOICES.get(label or "", "skip"))

    def print_deploy_instructions(self, target: str) -> None:
        if target not in DEPLOY_INSTRUCTIONS:
            return
        name, steps = DEPLOY_INSTRUCTIONS[target]
        self.logger.nl()
        self.logger.title(f"🌍 {name} Deployment:")
        self.logger.info(f"To deploy with {name}:")
        for line in steps:
            self.logger.info(line)
