"""
文件选择器单元测试

测试遍历、glob 匹配、错误处理等核心功能。
"""

import os

import pytest

from secchecker.build.selector import (
    FileSelector,
    PatternError,
    SelectionError,
    compile_pattern,
    match_name,
    select_files,
)

running_as_root = hasattr(os, "geteuid") and os.geteuid() == 0


class TestMatchName:
    """glob 匹配测试"""

    @pytest.mark.parametrize("pattern, name", [
        ("*.go", "main.go"),
        ("*.go", ".hidden.go"),
        ("?.go", "a.go"),
        ("[a-c].txt", "b.txt"),
        ("[!a]*", "bcd"),
        ("[^a]*", "bcd"),
        ("\\*.go", "*.go"),
        ("go.mod", "go.mod"),
        ("*", "anything at all"),
    ])
    def test_matches(self, pattern, name):
        """测试应匹配的情况"""
        assert match_name(pattern, name)

    @pytest.mark.parametrize("pattern, name", [
        ("*.go", "main.GO"),
        ("*.go", "main.go.bak"),
        ("?.go", "ab.go"),
        ("[^a]*", "abc"),
        ("\\*.go", "x.go"),
        ("[c-a]", "b"),
    ])
    def test_no_match(self, pattern, name):
        """测试不应匹配的情况（区分大小写，整体匹配）"""
        assert not match_name(pattern, name)

    @pytest.mark.parametrize("pattern", ["[", "[]", "[a-", "abc\\", "[a\\", "[-a]"])
    def test_invalid_pattern(self, pattern):
        """测试语法错误的模式"""
        with pytest.raises(PatternError):
            compile_pattern(pattern)

    def test_pattern_error_is_selection_error(self):
        """PatternError 属于 SelectionError"""
        assert issubclass(PatternError, SelectionError)


class TestFileSelector:
    """FileSelector 测试"""

    def test_init(self):
        """测试初始化"""
        selector = FileSelector()
        assert selector.matches == []
        assert selector.get_statistics() == {
            'files_visited': 0,
            'directories_visited': 0,
            'matched_files': 0,
        }

    def test_select_nested_go_files(self, go_tree):
        """测试递归选择所有深度的 .go 文件"""
        files = select_files(go_tree, "*.go")
        assert files == ["main.go", "util/helper.go"]

    def test_directories_never_selected(self, tmp_path):
        """测试名称匹配的目录不进入结果，但其内容仍被遍历"""
        (tmp_path / "weird.go").mkdir()
        (tmp_path / "weird.go" / "inner.go").write_text("package weird\n")

        files = select_files(tmp_path, "*.go")
        assert files == ["weird.go/inner.go"]

    def test_deep_tree(self, tmp_path):
        """测试多层目录"""
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        (deep / "x.go").write_text("")
        (tmp_path / "a" / "readme.md").write_text("")

        assert select_files(tmp_path, "*.go") == ["a/b/c/x.go"]

    def test_traversal_order(self, tmp_path):
        """测试深度优先、按名称排序的遍历顺序"""
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "z.go").write_text("")
        (tmp_path / "a.go").write_text("")
        (tmp_path / "c.go").write_text("")

        assert select_files(tmp_path, "*.go") == ["a.go", "b/z.go", "c.go"]

    def test_no_match_returns_empty(self, tmp_path):
        """测试没有匹配文件时返回空列表"""
        (tmp_path / "README.md").write_text("")
        (tmp_path / "go.mod").write_text("")

        assert select_files(tmp_path, "*.go") == []

    def test_empty_directory(self, tmp_path):
        """测试空目录"""
        assert select_files(tmp_path, "*.go") == []

    def test_base_name_only(self, tmp_path):
        """测试模式只匹配文件名，不匹配目录部分"""
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "main.go").write_text("")

        assert select_files(tmp_path, "pkg*") == []
        assert select_files(tmp_path, "main.go") == ["pkg/main.go"]

    def test_statistics(self, go_tree):
        """测试统计信息"""
        selector = FileSelector()
        selector.select(go_tree, "*.go")

        stats = selector.get_statistics()
        assert stats['files_visited'] == 4
        assert stats['directories_visited'] == 2  # 根目录 + util
        assert stats['matched_files'] == 2

    def test_missing_root(self, tmp_path):
        """测试根目录不存在"""
        with pytest.raises(SelectionError):
            select_files(tmp_path / "missing", "*.go")

    def test_invalid_pattern_checked_before_walk(self, tmp_path):
        """测试模式错误优先于遍历错误"""
        with pytest.raises(PatternError):
            select_files(tmp_path / "missing", "[")

    @pytest.mark.skipif(running_as_root, reason="root 不受目录权限限制")
    def test_unreadable_subdirectory(self, go_tree):
        """测试子目录不可读时整体失败，不返回部分结果"""
        locked = go_tree / "locked"
        locked.mkdir()
        (locked / "secret.go").write_text("")
        locked.chmod(0o000)

        selector = FileSelector()
        try:
            with pytest.raises(SelectionError):
                selector.select(go_tree, "*.go")
        finally:
            locked.chmod(0o755)

        assert selector.matches == []

    def test_unreadable_subdirectory_any_user(self, go_tree, deny_scandir):
        """测试目录无法列出时整体失败（不依赖文件权限，root 下同样有效）"""
        deny_scandir(go_tree / "util")

        selector = FileSelector()
        with pytest.raises(SelectionError, match="util"):
            selector.select(go_tree, "*.go")

        # main.go 在 util 之前被遍历，也不能作为部分结果返回
        assert selector.matches == []

    def test_unreadable_root_any_user(self, go_tree, deny_scandir):
        """测试根目录无法列出"""
        deny_scandir(go_tree)

        with pytest.raises(SelectionError, match="Permission denied"):
            select_files(go_tree, "*.go")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="平台不支持符号链接")
    def test_symlinked_directory_not_followed(self, tmp_path):
        """测试根目录以下的目录符号链接按普通项处理"""
        target = tmp_path / "target"
        target.mkdir()
        (target / "lib.go").write_text("")
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(target, root / "link")

        assert select_files(root, "*.go") == []
