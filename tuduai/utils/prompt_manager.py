from pathlib import Path
from typing import Dict


PROMPTS_DIR = Path(__file__).parent.parent / "prompts"  # tuduai/utils -> tuduai/prompts


class PromptTemplate:
    """Класс для работы с шаблонами промптов"""

    def __init__(self, template_path: str | Path):
        self.template_path = Path(template_path)
        self._template = None

    def load(self) -> str:
        """Загружает шаблон из файла"""
        if self._template is None:
            with open(self.template_path, 'r', encoding='utf-8') as f:
                self._template = f.read()
        return self._template

    def format(self, **kwargs) -> str:
        """Форматирует шаблон с переданными параметрами"""
        return self.load().format(**kwargs)


class PromptManager:
    """Менеджер для работы с промптами (*.md в папке prompts)"""

    def __init__(self, template_dir: str | Path | None = None):
        self.template_dir = Path(template_dir) if template_dir is not None else PROMPTS_DIR
        self._templates: Dict[str, PromptTemplate] = {}

    def get_template(self, name: str) -> PromptTemplate:
        """Получает шаблон по имени"""
        if name not in self._templates:
            template_path = self.template_dir / f"{name}.md"
            if not template_path.exists():
                raise FileNotFoundError(f"Prompt template '{name}' not found at {template_path}")
            self._templates[name] = PromptTemplate(template_path)

        return self._templates[name]

    def render(self, template_name: str, **kwargs) -> str:
        """Рендерит шаблон с параметрами"""
        return self.get_template(template_name).format(**kwargs)

    def list_templates(self) -> list[str]:
        """Возвращает список доступных шаблонов"""
        if not self.template_dir.exists():
            return []
        return sorted(path.stem for path in self.template_dir.glob("*.md"))


prompt_manager = PromptManager()
