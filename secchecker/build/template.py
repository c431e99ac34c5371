"""
扫描镜像 Dockerfile 模板

安装 gosec、govulncheck、safesql 三个 Go 安全检查工具，
容器启动时依次对整个源码树执行检查。
"""

# 以 0o777 写入，覆盖根目录下已有的同名文件
DOCKERFILE_MODE = 0o777

DOCKERFILE_TEMPLATE = """
FROM golang:latest

WORKDIR /app
ENV GO111MODULE=on

COPY . ./
RUN go mod download

RUN go install github.com/securego/gosec/v2/cmd/gosec@latest
RUN go install golang.org/x/vuln/cmd/govulncheck@latest
RUN go get github.com/stripe/safesql

CMD gosec ./... && govulncheck ./... && safesql ./..."""

SECURITY_TOOLS = ("gosec", "govulncheck", "safesql")
