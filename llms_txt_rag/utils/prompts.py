"""
Prompt templates for llms.txt generation, file selection and answering.
English and Japanese variants share the same placeholders and the same
<output> wrapper convention.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptSet:
    """All user-facing text for one language."""
    llms_txt: str
    search: str
    answer: str
    file_name_label: str
    file_path_label: str
    file_content_label: str
    repository_name_label: str
    repository_info_label: str
    tool_description: str
    query_description: str
    error_prefix: str
    unknown_tool: str


# llms.txt generation
LLMS_TXT_PROMPT_EN = """Please output llms.txt in the following format based on the repository information.

Repository information:
````
Repository name: {repository_name}
Repository URL: {repository_url}

File contents in the repository:
{file_contents}
````

Output format for llms.txt:
Please include the necessary information within the <output> tags as shown below.
<output>
# Repository name[Repository URL]

> Project overview

Project detailed description (within 500 characters)

## File list
- File name 1[File path 1]: File 1 overview (within 300 characters)
- File name 2[File path 2]: File 2 overview (within 300 characters)
...
</output>

Please begin the task now.
"""

LLMS_TXT_PROMPT_JA = """レポジトリ情報をもとに以下の形式でllms.txtを出力してください。

レポジトリ情報:
````
レポジトリ名: {repository_name}
レポジトリURL: {repository_url}

レポジトリ内のファイル内容:
{file_contents}
````

llms.txtの出力形式:
以下のように<output>タグ内に必要な情報を記載してください。
<output>
# レポジトリ名[レポジトリURL]

> プロジェクト概要説明

プロジェクト詳細説明(500文字以内で記載)

## ファイル一覧
- ファイル名1[ファイルパス1]: ファイル1の概要説明(300文字以内で記載)
- ファイル名2[ファイルパス2]: ファイル2の概要説明(300文字以内で記載)
...
</output>

それではタスクを開始してください。
"""

# Candidate file selection
SEARCH_PROMPT_EN = """Please list files from the repository that are relevant/helpful for the user's request.

Repository information:
````
{context}
````

User's request:
````
{user_request}
````

Output rules:
Identify the files needed to fulfill the user's request, and output the repository name, file path (including folders), and the reason why the file is relevant/helpful.
Wrap your output with <output> tags and format it as a list of dictionaries.
If no relevant files are found, output an empty list ([]).

Output format:
<output>
[
    {{
        "reason": "State here why this file is relevant/helpful",
        "repository_name": "Repository name here",
        "file_path": "File path here (including folder path)"
    }},
    ...
]
</output>

Please begin the task now.
"""

SEARCH_PROMPT_JA = """以下のレポジトリの情報をもとに、ユーザーの要求に関連する/役立つファイルをリストアップしてください。

リポジトリの情報:
````
{context}
````

ユーザーの要求:
````
{user_request}
````

出力ルール:
ユーザーの要求を達成するために必要なファイルを特定し、レポジトリ名とファイルパス(フォルダを含む)、ファイルが関連する/役立つと考える理由を出力してください。
出力は<output>タグで囲み、辞書のリスト形式で出力してください。
見つからない場合は空のリスト([])を出力してください。

出力形式:
<output>
[
    {{
        "reason": "ここにこのファイルが関連する/役立つと考える理由を記載する",
        "repository_name": "ここにリポジトリ名を記載する",
        "file_path": "ここにファイルパスを記載する(フォルダを含むパス)"
    }},
    ...
]
</output>

それではタスクを開始してください。
"""

# Final answer generation
ANSWER_PROMPT_EN = """Please answer the user's request using the information from the reference file.

Reference file:
````
{context}
````

User request:
````
{user_request}
````

Now start the task.
"""

ANSWER_PROMPT_JA = """参考ファイルの情報を活用して、ユーザーの要求に回答してください。

参考ファイル:
````
{context}
````

ユーザーの要求:
````
{user_request}
````

それではタスクを開始してください。
"""


PROMPTS = {
    "en": PromptSet(
        llms_txt=LLMS_TXT_PROMPT_EN,
        search=SEARCH_PROMPT_EN,
        answer=ANSWER_PROMPT_EN,
        file_name_label="File name",
        file_path_label="File path",
        file_content_label="File content",
        repository_name_label="Repository name",
        repository_info_label="Repository information",
        tool_description=(
            "Retrieves information related to user queries from internal GitHub repositories. "
            "GitHub repositories include code used in projects and R&D, as well as internal documentation."
        ),
        query_description="User question or request",
        error_prefix="Error: ",
        unknown_tool="Unknown tool: {name}",
    ),
    "ja": PromptSet(
        llms_txt=LLMS_TXT_PROMPT_JA,
        search=SEARCH_PROMPT_JA,
        answer=ANSWER_PROMPT_JA,
        file_name_label="ファイル名",
        file_path_label="ファイルパス",
        file_content_label="ファイル内容",
        repository_name_label="リポジトリ名",
        repository_info_label="リポジトリの情報",
        tool_description=(
            "社内のGitHubリポジトリからユーザーの質問に関連する情報を取得します。"
            "GitHubレポジトリには、プロジェクトや研究開発で使用したコードや社内ドキュメントが含まれます。"
        ),
        query_description="ユーザーからの質問やリクエスト",
        error_prefix="エラー: ",
        unknown_tool="未知のツール: {name}",
    ),
}


def get_prompts(language: str = "en") -> PromptSet:
    """Return the prompt set for a language code ('en' or 'ja')."""
    try:
        return PROMPTS[language]
    except KeyError:
        raise ValueError(f"No prompts for language: {language!r}") from None
