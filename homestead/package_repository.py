"""In-memory catalogue of the packages that can be installed."""

from __future__ import annotations

import threading
from dataclasses import replace

from homestead.models import NotFoundError, Package, PackageCategory

_DEB_INSTALL = "sudo dpkg -i {{download_path}} || sudo apt-get install -f -y"
_BUILT_IN_PLUGIN = "# Built-in plugin"


def _open_site(name: str) -> str:
    return f'echo "Abra o site do {name} no navegador para seguir as instruções de instalação."'


def _custom_plugin_check(directory: str) -> str:
    return f"test -d ${{ZSH_CUSTOM:-~/.oh-my-zsh/custom}}/plugins/{directory}"


def _built_in_plugin_check(name: str) -> str:
    return f"test -f ~/.oh-my-zsh/plugins/{name}/{name}.plugin.zsh"


# Entries whose installation fetches from the network carry no remote source
# in this catalogue; a full definition can be registered with save().
_DEFAULT_PACKAGES = (
    # IDEs
    Package(
        id="claude-code",
        name="Claude Code CLI",
        description="CLI oficial da Anthropic para desenvolvimento com Claude",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd="bash install.sh",
        check_cmd="which claude-code",
    ),
    Package(
        id="cursor",
        name="Cursor AI",
        description="Editor de código com IA integrada",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd="chmod +x cursor.AppImage && sudo mv cursor.AppImage /usr/local/bin/cursor",
        check_cmd="which cursor",
    ),
    Package(
        id="antigravity",
        name="Antigravity",
        description="IDE moderna com recursos avançados",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd="sudo dpkg -i antigravity.deb || sudo apt-get install -f -y",
        check_cmd="which antigravity",
    ),
    Package(
        id="vscode",
        name="VS Code",
        description="Editor de código da Microsoft, leve e extensível",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd=_DEB_INSTALL,
        check_cmd="which code",
    ),
    Package(
        id="zed",
        name="Zed",
        description="Editor de código moderno e rápido, focado em colaboração",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd=_DEB_INSTALL,
        check_cmd="which zed",
    ),
    Package(
        id="neovim",
        name="Neovim",
        description="Fork moderno do Vim, extensível e otimizado para uso em terminal",
        version="latest",
        category=PackageCategory.IDE,
        install_cmd="sudo apt-get update && sudo apt-get install -y neovim",
        check_cmd="which nvim",
    ),
    # Terminal emulators
    Package(
        id="wezterm",
        name="WezTerm",
        description=(
            "Emulador de terminal altamente configurável, com renderização via GPU "
            "e multiplexação integrada"
        ),
        version="latest",
        category=PackageCategory.TERMINAL,
        install_cmd=_open_site("WezTerm"),
        check_cmd="which wezterm",
    ),
    Package(
        id="kitty",
        name="Kitty",
        description=(
            "Emulador de terminal rápido com renderização via GPU, suporte a imagens "
            "e multiplexação nativa"
        ),
        version="latest",
        category=PackageCategory.TERMINAL,
        install_cmd=_open_site("Kitty"),
        check_cmd="which kitty",
    ),
    Package(
        id="alacritty",
        name="Alacritty",
        description="Emulador de terminal minimalista e extremamente rápido, configurado via YAML",
        version="latest",
        category=PackageCategory.TERMINAL,
        install_cmd=_open_site("Alacritty"),
        check_cmd="which alacritty",
    ),
    Package(
        id="warp",
        name="Warp",
        description=(
            "Terminal moderno com IA integrada, interface visual inovadora e blocos de comandos"
        ),
        version="latest",
        category=PackageCategory.TERMINAL,
        install_cmd=_open_site("Warp"),
        check_cmd="which warp",
    ),
    Package(
        id="wave-terminal",
        name="Wave Terminal",
        description="Terminal moderno open-source inspirado no Warp, com foco em colaboração",
        version="latest",
        category=PackageCategory.TERMINAL,
        install_cmd=_open_site("Wave Terminal"),
        check_cmd="which wave",
    ),
    # Shell core
    Package(
        id="zsh",
        name="Zsh",
        description="Z Shell - shell poderoso e configurável",
        version="latest",
        category=PackageCategory.ZSH_CORE,
        install_cmd="sudo apt-get install -y zsh",
        check_cmd="which zsh",
    ),
    Package(
        id="oh-my-zsh",
        name="Oh My Zsh",
        description="Framework para gerenciar configuração Zsh",
        version="latest",
        category=PackageCategory.ZSH_CORE,
        check_cmd="test -d ~/.oh-my-zsh",
    ),
    Package(
        id="powerlevel10k",
        name="Powerlevel10k",
        description="Tema Zsh rápido e customizável",
        version="latest",
        category=PackageCategory.ZSH_CORE,
        check_cmd="test -d ${ZSH_CUSTOM:-~/.oh-my-zsh/custom}/themes/powerlevel10k",
    ),
    # Alternative shells
    Package(
        id="fish-shell",
        name="Fish Shell",
        description=(
            "Shell amigável e moderno, com autosuggestions e syntax highlighting nativos"
        ),
        version="latest",
        category=PackageCategory.SHELL,
        install_cmd="sudo apt-get install -y fish",
        check_cmd="which fish",
    ),
    Package(
        id="fisher",
        name="Fisher",
        description="Gerenciador de plugins para Fish Shell",
        version="latest",
        category=PackageCategory.SHELL,
        check_cmd="fish -c 'type -q fisher'",
    ),
    # Zsh plugins, built in
    Package(
        id="zsh-plugin-git",
        name="Git Plugin",
        description="Plugin built-in do Oh My Zsh para Git",
        version="built-in",
        category=PackageCategory.TOOL,
        install_cmd=_BUILT_IN_PLUGIN,
        check_cmd=_built_in_plugin_check("git"),
    ),
    Package(
        id="zsh-plugin-docker",
        name="Docker Plugin",
        description="Plugin built-in do Oh My Zsh para Docker",
        version="built-in",
        category=PackageCategory.TOOL,
        install_cmd=_BUILT_IN_PLUGIN,
        check_cmd=_built_in_plugin_check("docker"),
    ),
    Package(
        id="zsh-plugin-rails",
        name="Rails Plugin",
        description="Plugin built-in do Oh My Zsh para Ruby on Rails",
        version="built-in",
        category=PackageCategory.TOOL,
        install_cmd=_BUILT_IN_PLUGIN,
        check_cmd=_built_in_plugin_check("rails"),
    ),
    Package(
        id="zsh-plugin-z",
        name="Z Plugin",
        description="Plugin built-in para navegação rápida de diretórios",
        version="built-in",
        category=PackageCategory.TOOL,
        install_cmd=_BUILT_IN_PLUGIN,
        check_cmd=_built_in_plugin_check("z"),
    ),
    Package(
        id="zsh-plugin-sudo",
        name="Sudo Plugin",
        description="Plugin built-in para adicionar sudo facilmente",
        version="built-in",
        category=PackageCategory.TOOL,
        install_cmd=_BUILT_IN_PLUGIN,
        check_cmd=_built_in_plugin_check("sudo"),
    ),
    # Zsh plugins, external
    Package(
        id="zsh-autosuggestions",
        name="Zsh Autosuggestions",
        description="Sugestões automáticas baseadas no histórico",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-autosuggestions"),
    ),
    Package(
        id="zsh-syntax-highlighting",
        name="Zsh Syntax Highlighting",
        description="Destaque de sintaxe para comandos Zsh",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-syntax-highlighting"),
    ),
    Package(
        id="fzf-zsh",
        name="FZF Zsh Integration",
        description="Integração do FZF com Zsh",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="test -d ~/.fzf",
    ),
    Package(
        id="you-should-use",
        name="You Should Use",
        description="Lembra aliases existentes ao digitar comandos",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("you-should-use"),
    ),
    Package(
        id="zsh-completions",
        name="Zsh Completions",
        description="Completions adicionais para Zsh",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-completions"),
    ),
    Package(
        id="zsh-history-substring-search",
        name="Zsh History Substring Search",
        description="Busca no histórico por substring",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-history-substring-search"),
    ),
    Package(
        id="fast-syntax-highlighting",
        name="Fast Syntax Highlighting",
        description="Syntax highlighting mais rápido",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("fast-syntax-highlighting"),
    ),
    Package(
        id="zsh-autocomplete",
        name="Zsh Autocomplete",
        description="Autocomplete em tempo real para Zsh",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-autocomplete"),
    ),
    Package(
        id="auto-notify",
        name="Auto Notify",
        description="Notificações automáticas para comandos longos",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("auto-notify"),
    ),
    Package(
        id="zsh-vi-mode",
        name="Zsh Vi Mode",
        description="Melhor modo Vi para Zsh",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd=_custom_plugin_check("zsh-vi-mode"),
    ),
    # AI in the terminal
    Package(
        id="shell-gpt",
        name="ShellGPT",
        description=(
            "Assistente de IA universal para qualquer shell "
            "(explicações e sugestões inteligentes)"
        ),
        version="latest",
        category=PackageCategory.AI,
        install_cmd=(
            'echo "Abra o repositório ShellGPT no navegador para seguir as instruções '
            'de instalação (requer API key)."'
        ),
        check_cmd="command -v sgpt",
    ),
    Package(
        id="fish-ai",
        name="Fish-AI",
        description="Integração de IA específica para Fish Shell, com sugestões inline",
        version="latest",
        category=PackageCategory.AI,
        install_cmd=(
            'echo "Abra o repositório fish-ai no navegador para seguir as instruções '
            'de instalação."'
        ),
        check_cmd="test -d ~/.config/fish",
    ),
    # Development tools
    Package(
        id="nvm",
        name="NVM (Node Version Manager)",
        description="Gerenciador de versões Node.js",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="test -d ~/.nvm",
    ),
    Package(
        id="bun",
        name="Bun",
        description="Runtime JavaScript/TypeScript rápido",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="test -d ~/.bun",
    ),
    Package(
        id="sdkman",
        name="SDKMAN!",
        description="Gerenciador de SDKs para JVM",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="test -d ~/.sdkman",
    ),
    Package(
        id="pnpm",
        name="pnpm",
        description="Gerenciador de pacotes Node.js eficiente",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which pnpm",
    ),
    Package(
        id="deno",
        name="Deno",
        description="Runtime seguro para JavaScript e TypeScript",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which deno",
    ),
    Package(
        id="angular-cli",
        name="Angular CLI",
        description="Interface de linha de comando para Angular",
        version="latest",
        category=PackageCategory.TOOL,
        install_cmd="npm install -g @angular/cli",
        check_cmd="which ng",
    ),
    Package(
        id="openvpn3",
        name="OpenVPN 3",
        description="Cliente VPN moderno",
        version="latest",
        category=PackageCategory.TOOL,
        install_cmd="sudo apt-get install -y openvpn3",
        check_cmd="which openvpn3",
    ),
    Package(
        id="gh",
        name="GitHub CLI",
        description=(
            "CLI oficial do GitHub; necessário para criar repositórios automaticamente "
            "no fluxo Configurar Zsh"
        ),
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which gh",
    ),
    Package(
        id="homebrew",
        name="Homebrew",
        description="Gerenciador de pacotes para Linux",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which brew",
    ),
    Package(
        id="openjdk",
        name="Java OpenJDK",
        description="Implementação open-source da plataforma Java (JDK)",
        version="latest",
        category=PackageCategory.TOOL,
        install_cmd="sudo apt-get update && sudo apt-get install -y openjdk-21-jdk",
        check_cmd="which javac",
    ),
    Package(
        id="starship",
        name="Starship",
        description="Prompt minimalista, rápido e personalizável para qualquer shell",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which starship",
    ),
    Package(
        id="flathub",
        name="Flathub (Flatpak Remote)",
        description="Repositório principal de aplicações Flatpak",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="flatpak remote-list | grep -q flathub",
    ),
    Package(
        id="google-chrome",
        name="Google Chrome",
        description="Navegador web Google Chrome (versão estável)",
        version="latest",
        category=PackageCategory.APP,
        install_cmd=_DEB_INSTALL,
        check_cmd="which google-chrome || which google-chrome-stable",
    ),
    Package(
        id="insomnia",
        name="Insomnia",
        description="Cliente HTTP e GraphQL para testar APIs",
        version="latest",
        category=PackageCategory.APP,
        install_cmd="flatpak install -y flathub rest.insomnia.Insomnia",
        check_cmd="flatpak list | grep -q rest.insomnia.Insomnia",
    ),
    Package(
        id="remmina",
        name="Remmina",
        description=(
            "Cliente de desktop remoto com suporte a RDP, VNC, SPICE, X2Go, SSH e mais"
        ),
        version="latest",
        category=PackageCategory.APP,
        install_cmd="sudo apt-get update && sudo apt-get install -y remmina",
        check_cmd="which remmina",
    ),
    Package(
        id="distrobox",
        name="Distrobox",
        description="Contêineres integrados ao sistema para múltiplas distribuições Linux",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which distrobox",
    ),
    Package(
        id="mise",
        name="Mise",
        description="Gerenciador de versões para múltiplas linguagens e ferramentas",
        version="latest",
        category=PackageCategory.TOOL,
        check_cmd="which mise",
    ),
    Package(
        id="dotnet-sdk",
        name=".NET SDK",
        description="SDK do .NET para desenvolvimento de aplicações",
        version="8.0",
        category=PackageCategory.TOOL,
        check_cmd="which dotnet",
    ),
    # Games
    Package(
        id="prism-launcher",
        name="Prism Launcher",
        description="Launcher open-source para Minecraft com múltiplas instâncias",
        version="latest",
        category=PackageCategory.GAMES,
        install_cmd="flatpak install -y flathub org.prismlauncher.PrismLauncher",
        check_cmd="flatpak list | grep -q org.prismlauncher.PrismLauncher",
    ),
    Package(
        id="lutris",
        name="Lutris",
        description="Plataforma de jogos para Linux, integrando Wine, emuladores e lojas",
        version="latest",
        category=PackageCategory.GAMES,
        install_cmd="flatpak install -y flathub net.lutris.Lutris",
        check_cmd="flatpak list | grep -q net.lutris.Lutris",
    ),
    Package(
        id="gear-lever",
        name="Gear Lever",
        description="Gerenciador gráfico para integrar e atualizar AppImages no sistema",
        version="latest",
        category=PackageCategory.APP,
        install_cmd="flatpak install -y flathub it.mijorus.gearlever",
        check_cmd="flatpak list | grep -q it.mijorus.gearlever",
    ),
)


class PackageRepository:
    """Thread-safe in-memory package catalogue, seeded with the default packages.

    Packages are copied on the way in and out, so callers cannot change
    stored entries by mutating what they hold.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._packages: dict[str, Package] = {p.id: replace(p) for p in _DEFAULT_PACKAGES}

    def find_all(self) -> list[Package]:
        with self._lock:
            return [replace(p) for p in self._packages.values()]

    def find_by_id(self, package_id: str) -> Package:
        with self._lock:
            try:
                return replace(self._packages[package_id])
            except KeyError:
                raise NotFoundError(f"package {package_id}: not found") from None

    def find_by_category(self, category: PackageCategory | str) -> list[Package]:
        with self._lock:
            return [replace(p) for p in self._packages.values() if p.category == category]

    def save(self, package: Package) -> None:
        """Validate and store a copy of the package, replacing any with the same id."""
        package.validate()
        with self._lock:
            self._packages[package.id] = replace(package)

    def delete(self, package_id: str) -> None:
        with self._lock:
            if package_id not in self._packages:
                raise NotFoundError(f"delete package {package_id}: not found")
            del self._packages[package_id]

    def exists(self, package_id: str) -> bool:
        with self._lock:
            return package_id in self._packages